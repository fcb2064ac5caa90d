from typing import Iterable

import structlog

from sentinel.modules.responders.models import Responder
from sentinel.shared.constants import Specialty
from sentinel.shared.exceptions import UnknownResponderId

log = structlog.get_logger()


class ResponderDirectory:
    """
    In-memory roster of responders keyed by id.

    Only the active members of the initial roster are loaded. After that,
    add/remove work on the full live set so deactivated responders stay
    stored and can be toggled back on.
    """

    def __init__(self, initial: Iterable[Responder] = ()) -> None:
        self._responders: dict[str, Responder] = {
            responder.id: responder for responder in initial if responder.is_active
        }

    def add(self, responder: Responder) -> Responder:
        replaced = responder.id in self._responders
        self._responders[responder.id] = responder
        log.info("responder_saved", responder_id=responder.id, replaced=replaced)
        return responder

    def remove(self, responder_id: str) -> bool:
        removed = self._responders.pop(responder_id, None) is not None
        if removed:
            log.info("responder_removed", responder_id=responder_id)
        return removed

    def get(self, responder_id: str) -> Responder:
        responder = self._responders.get(responder_id)
        if responder is None:
            raise UnknownResponderId(responder_id)
        return responder

    def toggle_active(self, responder_id: str) -> Responder:
        current = self.get(responder_id)
        toggled = current.model_copy(update={"is_active": not current.is_active})
        self._responders[responder_id] = toggled
        log.info("responder_toggled", responder_id=responder_id, is_active=toggled.is_active)
        return toggled

    def list_all(self) -> list[Responder]:
        return list(self._responders.values())

    def list_active(self) -> list[Responder]:
        return [r for r in self._responders.values() if r.is_active]

    def select_for(self, specialties: set[Specialty]) -> list[Responder]:
        """Active responders sharing at least one of the given specialties."""
        return [r for r in self.list_active() if r.specialties & specialties]
