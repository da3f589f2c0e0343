from functools import reduce


def compose(*funcs):
    """compose(f, g, h)(x) == f(g(h(x)))"""
    return reduce(lambda f, g: lambda x: f(g(x)), funcs)


def pipe(*funcs):
    """pipe(f, g, h)(x) == h(g(f(x))) — шаги оформления заказа читаются сверху вниз"""
    return reduce(lambda f, g: lambda x: g(f(x)), funcs)
