from rich.pretty import pprint

from argbind import *

depth = Slot(Type.INT, 3)
mode = Slot(Type.STRING, "fast")
verbose = Slot(Type.BOOL, False)
level = Slot(Type.INT, 0)
file = Slot(Type.STRING)

parser = Parser(description="walk a tree up to a given depth", epilog="example program")
parser.add_arguments([
    positional(Type.STRING, "FILE", file, "input file"),
    option(Type.INT, "d", "--max-depth", depth, "recursion limit"),
    option(Type.STRING, "m", "--mode", mode, "traversal mode", choices=("fast", "safe")),
    toggle("v", "--verbose", verbose, "chatty output"),
    count("q", "--quiet", level, "less output, repeatable"),
])


if __name__ == '__main__':
    parser.parse_args()
    pprint(parser.registry.options)
    pprint(file)
