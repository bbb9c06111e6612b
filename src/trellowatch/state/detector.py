"""Change detection between two board snapshots.

Pure and deterministic: no I/O, and the output order only depends on the
order of the inputs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from trellowatch._constants import UNKNOWN_LIST_NAME
from trellowatch.models.board import Card
from trellowatch.models.changes import ChangeEvent
from trellowatch.models.snapshot import CardRecord


def detect_changes(previous: Mapping[str, CardRecord], current: Sequence[Card]) -> list[ChangeEvent]:
    """Classify every difference between *previous* and *current*.

    Cards of *current* are visited first, in fetch order:

    * unknown id -> ``CREATED``
    * known id whose ``id_list`` differs -> ``MOVED`` (list *ids* are
      compared, so two lists sharing a name are still different lists)
    * known id in the same list -> nothing

    Then ids of *previous* missing from *current* yield ``REMOVED``, in
    snapshot order, using the list name stored in the snapshot.
    """
    changes: list[ChangeEvent] = []
    seen: set[str] = set()

    for card in current:
        seen.add(card.id)
        to_list = card.list_name or UNKNOWN_LIST_NAME
        before = previous.get(card.id)
        if before is None:
            changes.append(ChangeEvent.created(card.id, card.name, to_list))
        elif before.id_list != card.id_list:
            changes.append(ChangeEvent.moved(card.id, card.name, before.list_name, to_list))

    for card_id, record in previous.items():
        if card_id not in seen:
            changes.append(ChangeEvent.removed(card_id, record.name, record.list_name))

    return changes
