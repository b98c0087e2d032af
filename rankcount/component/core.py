'''Common functionality for components.

Functions to build function registers and retrievers around them.
There should normally be no need to use these functions directly.
'''

from typing import Callable, Dict, Tuple, Union


def register_functions(register: Dict[str, Callable],
                       name: str,
                       ) -> Tuple[Callable, Callable, Callable]:
    '''Construct the marker, getter and constructer for a register.

    :param register: The dictionary to store the functions in, keyed by
        function name.
    :param name: Human-readable name of the component kind, used in error
        messages.
    :returns: A 3-tuple of a registration decorator, a retriever by name and
        a constructer that passes custom callables through unchanged.
    '''
    def mark(func: Callable) -> Callable:
        register[func.__name__] = func
        return func

    def get(func_def: str) -> Callable:
        try:
            return register[func_def]
        except KeyError:
            raise KeyError(f'unknown {name}: {func_def}')

    def construct(func_def: Union[str, Callable]) -> Callable:
        return func_def if callable(func_def) else get(func_def)

    get.__doc__ = f'Return a {name} function by its name.'
    construct.__doc__ = (
        f'Get a {name} function by its name from the register. If a custom'
        ' callable is given, pass it through unchanged.'
    )
    return mark, get, construct
