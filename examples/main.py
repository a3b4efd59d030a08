import operator
import sys

from databags import Container, Symbol, TypedMapping, newtype, wrap
from databags.cli import cli_args_to_config
from databags.display import render

Measurement = newtype('Measurement', doc='Units and steps of a measurement.')


def main(overrides: dict) -> None:
    grid = Measurement(units='µm', dx=0.20, dy=0.15)
    grid.merge_into(overrides)
    print(render(grid))

    # Entries stored elsewhere are shared, not copied.
    steps = TypedMapping[Symbol, float](dx=0.2)
    shared = wrap(Container, steps)
    shared.dy = 1
    print(steps)

    totals = Container[str, float]().merge_into({'a': 1, 'b': 2}, {'a': 0.5}, combine=operator.add)
    print(render(totals))


if __name__ == '__main__':
    main(cli_args_to_config(sys.argv[1:]))
