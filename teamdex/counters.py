# teamdex/counters.py
from typing import FrozenSet, Optional

from teamdex.constants import PokeType
from teamdex.errors import DataUnavailable
from teamdex.relations import DamageRelations, RelationRepository


def find_counter_types(weakness_type, relations_for_type: Optional[DamageRelations]) -> FrozenSet[PokeType]:
    """Attacking types that hit `weakness_type` for 2x, i.e. good additions against it."""
    t = PokeType.parse(weakness_type, strict=True)
    if relations_for_type is None:
        raise DataUnavailable(f"no damage relations for {t.value}", resource=t.value)
    if relations_for_type.type is not t:
        raise DataUnavailable(
            f"damage relations for {relations_for_type.type.value} given for {t.value}",
            resource=t.value,
        )
    return frozenset(relations_for_type.double_from)


def counters_for(weakness_type, repository: RelationRepository) -> FrozenSet[PokeType]:
    t = PokeType.parse(weakness_type, strict=True)
    return find_counter_types(t, repository.get(t))
