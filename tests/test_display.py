from datetime import date
from fractions import Fraction
from typing import Any

from databags import Container, Symbol, newtype
from databags.config import bind_config_values
from databags.display import DisplaySettings, format_key, format_value, render, summary

Record = newtype('Record')


class FakePrinter:
    def __init__(self) -> None:
        self.output = ''

    def text(self, text: str) -> None:
        self.output += text


def test_summary():
    assert summary(Container()) == 'Container[Symbol, Any] with 0 entries'
    assert summary(Record(a=1)) == 'Record with 1 entry'


def test_render():
    bag = Container(units='km', dx=0.2, shape=[3, 4])
    assert render(bag) == (
        'Container[Symbol, Any] with 3 entries:\n'
        '  dx    => 0.2\n'
        '  shape => 2-element list\n'
        "  units => 'km'"
    )


def test_render_empty():
    assert render(Record()) == 'Record with 0 entries'


def test_render_with_bound_settings():
    bind_config_values(DisplaySettings={'indent': 1, 'separator': ': ', 'align_keys': False})
    bag = Record(b=2, a=1, long=3)
    assert render(bag) == 'Record with 3 entries:\n a: 1\n b: 2\n long: 3'


def test_settings_defaults():
    settings = DisplaySettings()
    assert settings.indent == 2
    assert settings.separator == ' => '
    assert settings.align_keys is True

    bind_config_values(**{'DisplaySettings.indent': 4})
    assert settings.indent == 4


def test_render_incomparable_keys():
    bag = Container({2: 'b', 'a': 1, 1: 'a'})
    lines = render(bag).splitlines()
    assert lines[1:] == ["  1   => 'a'", "  2   => 'b'", "  'a' => 1"]


def test_format_key():
    assert format_key(Symbol('a')) == 'a'
    assert format_key('a') == "'a'"
    assert format_key(1) == '1'


def test_format_value():
    assert format_value(1) == '1'
    assert format_value(0.5) == '0.5'
    assert format_value(Fraction(1, 3)) == '1/3'
    assert format_value(True) == 'True'
    assert format_value('µm') == "'µm'"
    assert format_value(range(3)) == 'range(0, 3)'
    assert format_value(date(2024, 5, 1)) == "date('2024-05-01')"
    assert format_value((1, 2, 3)) == '3-element tuple'
    assert format_value({'a': 1}) == '1-element dict'
    assert format_value(None) == '<NoneType>'
    assert format_value(Container(a=Container())) == 'Container[Symbol, Any] with 1 entry'


def test_format_value_is_extensible():
    class Celsius:
        def __init__(self, degrees: float) -> None:
            self.degrees = degrees

    @format_value.register
    def _(value: Celsius) -> str:
        return f'{value.degrees} °C'

    assert format_value(Celsius(21.5)) == '21.5 °C'


def test_repr_pretty():
    bag: Any = Record(a=1)
    printer = FakePrinter()
    bag._repr_pretty_(printer, False)
    assert printer.output == 'Record with 1 entry:\n  a => 1'

    printer = FakePrinter()
    bag._repr_pretty_(printer, True)
    assert printer.output == 'Record with 1 entry'
