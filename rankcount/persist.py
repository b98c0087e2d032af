'''Conversion of components and results to and from JSON-ready structures.

Configurable components (resolvers, the runoff engine, tie-breaking chains,
candidate registries) gain a ``to_dict()`` method from the
:func:`simple_serialization` decorator and can be rebuilt from its output by
:func:`from_dict`. Results and trace records are frozen dataclasses; they
serialize field by field but are not meant to be rebuilt.

The structures use a few tagged dictionaries:

-   ``{'class': 'module.Name', ...}`` for a component and its constructor
    arguments,
-   ``{'callable': 'module.name'}`` for a registered component function,
-   ``{'type': 'module.Name', 'arguments': [...]}`` for values such as
    fractions that are rebuilt from positional arguments,
-   ``{'type': 'dict', 'keys': [...], 'values': [...]}`` for dictionaries
    with non-string keys (such as mappings keyed by candidate index).
'''

import sys
import inspect
import importlib
import dataclasses
from fractions import Fraction
from typing import Any, Callable, Dict, List


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    The method serializes the attributes named like the class's constructor
    parameters, so it only works for classes that store their constructor
    arguments unchanged (or in a form the constructor accepts again).

    :param class_: The class to add the method to.
    '''
    if class_.__init__ is object.__init__:
        param_names: List[str] = []
    else:
        param_names = [
            name for name in inspect.signature(class_.__init__).parameters
            if name != 'self'
        ]

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {'class': scoped_class_name(self)}
        for name in param_names:
            out_dict[name] = serialize_value(getattr(self, name))
        return out_dict

    class_.to_dict = to_dict
    return class_


def serialize_value(value: Any) -> Any:
    '''Convert a value to a JSON-ready structure.'''
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: serialize_value(getattr(value, field.name))
            for field in dataclasses.fields(value)
        }
    elif isinstance(value, ATOMIC_TYPES):
        return value
    elif type(value) in CONVERTIBLE_TYPES:
        return CONVERTIBLE_TYPES[type(value)](value)
    elif isinstance(value, dict):
        if all(isinstance(key, str) for key in value):
            return {key: serialize_value(val) for key, val in value.items()}
        return {
            'type': 'dict',
            'keys': [serialize_value(key) for key in value.keys()],
            'values': [serialize_value(val) for val in value.values()],
        }
    elif isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    elif callable(value):
        return {'callable': f'{value.__module__}.{value.__name__}'}
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def deserialize_value(value: Any) -> Any:
    if isinstance(value, list):
        return [deserialize_value(item) for item in value]
    elif not isinstance(value, dict):
        if isinstance(value, ATOMIC_TYPES):
            return value
        raise ValueError(f'cannot deserialize {value!r}, type unknown')
    elif value.get('type') == 'dict':
        return dict(zip(
            deserialize_value(value['keys']),
            deserialize_value(value['values']),
        ))
    elif is_scoped_identifier(value.get('type')):
        return get_object(value['type'])(
            *deserialize_value(value['arguments'])
        )
    elif is_scoped_identifier(value.get('class')):
        params = {
            key: deserialize_value(val)
            for key, val in value.items() if key != 'class'
        }
        return get_object(value['class'])(**params)
    elif is_scoped_identifier(value.get('callable')):
        return get_object(value['callable'])
    else:
        return {key: deserialize_value(val) for key, val in value.items()}


def get_object(identifier: str) -> Any:
    '''Retrieve an object by its module-qualified name.'''
    module, name = identifier.rsplit('.', 1)
    if module not in sys.modules:
        importlib.import_module(module)
    return getattr(sys.modules[module], name)


def from_dict(value: Dict[str, Any]) -> Any:
    """Rebuild a resolver, engine or other component from a dictionary.

    :param value: A dictionary created by the component's ``to_dict()``.
    """
    if not isinstance(value, dict):
        raise ValueError(
            f'invalid rankcount object def: dict expected, got {value!r}'
        )
    elif 'class' not in value:
        raise ValueError('invalid rankcount object def: must have a class key')
    elif not is_scoped_identifier(value['class']):
        raise ValueError(f"invalid rankcount class def: {value['class']}")
    return deserialize_value(value)


def to_dict(obj: Any) -> Dict[str, Any]:
    """Serialize a component or a result to a JSON-ready dictionary.

    :param obj: A resolver, engine, tiebreaker or similar component (these
        provide a `to_dict()` method courtesy of the simple_serialization
        decorator), or a result object such as
        :class:`rankcount.evaluate.core.ResolverResult`.
    """
    return serialize_value(obj)


def is_scoped_identifier(value: Any) -> bool:
    '''Tell whether the value is a dotted name with a module part.'''
    return (
        isinstance(value, str)
        and '.' in value
        and all(chunk.isidentifier() for chunk in value.split('.'))
    )


def scoped_class_name(value: Any) -> str:
    cls = value.__class__
    return f'{cls.__module__}.{cls.__name__}'


def fraction_to_json(f: Fraction) -> Dict[str, Any]:
    return {
        'type': 'fractions.Fraction',
        'arguments': [f.numerator, f.denominator],
    }


ATOMIC_TYPES = (str, int, float, bool, type(None))

CONVERTIBLE_TYPES: Dict[type, Callable[[Any], Any]] = {
    Fraction: fraction_to_json,
}
