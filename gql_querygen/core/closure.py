"""Reference closure analysis for input objects.

An object type reachable from an input object's fields may be supplied as a
value inside an argument, so its generated class must also support input
serialization. The type graph can be cyclic; traversal tracks visited type
names per top-level call.
"""

from .schema import Schema, SchemaType, TypeKind

_DESCEND_KINDS = (TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION, TypeKind.INPUT_OBJECT)


def find_referenced_object_types(schema: Schema, schema_type: SchemaType) -> frozenset[str]:
    """Return names of OBJECT types transitively reachable from ``schema_type``.

    Field (or input field) references are followed through any LIST/NON_NULL
    wrapping into further object, interface, union and input object types.
    ``schema_type`` itself is only included when it is reached again.
    """
    found: set[str] = set()
    visited = {schema_type.name}
    pending = [schema_type]

    while pending:
        current = pending.pop()
        for member in current.members:
            named = member.type.named_type()
            if named.kind not in _DESCEND_KINDS:
                continue
            if named.kind is TypeKind.OBJECT:
                found.add(named.name)
            if named.name in visited:
                continue
            visited.add(named.name)
            pending.append(schema.get_type(named.name))

    return frozenset(found)


def find_input_reachable_types(schema: Schema) -> frozenset[str]:
    """Union of the object closures of every non-reserved input object."""
    reachable: set[str] = set()
    for input_type in schema.types_of_kind(TypeKind.INPUT_OBJECT):
        reachable |= find_referenced_object_types(schema, input_type)
    return frozenset(reachable)
