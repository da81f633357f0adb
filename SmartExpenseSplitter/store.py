"""
Store Module

In-memory registry of ledgers for the web shells, one ledger per group.

Nothing is written to disk: groups live for as long as the process does.

Data Model:
    groups/{group_id}
        - group_id: string (group_<8 hex chars>)
        - name: string
        - ledger: Ledger

Classes:
    UnknownGroup: Lookup of a group id that was never created.
    LedgerStore: Create, fetch and list groups.
"""

import logging
import threading
import uuid

from expenses import ResiduePolicy
from ledger import Ledger


logger = logging.getLogger(__name__)


class UnknownGroup(KeyError):
    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(group_id)

    def __str__(self) -> str:
        return f"Group {self.group_id} not found"


def _generate_group_id() -> str:
    """
    Generate a unique group ID.

    Format: group_{short_uuid}
    """
    return f"group_{uuid.uuid4().hex[:8]}"


class Group:
    """A named ledger."""

    def __init__(self, group_id: str, name: str, ledger: Ledger):
        self.group_id = group_id
        self.name = name
        self.ledger = ledger

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "name": self.name,
            "participants": len(self.ledger.list_participants()),
            "expenses": len(self.ledger.list_expenses())
        }


class LedgerStore:
    """Thread-safe mapping of group id to Group."""

    def __init__(self, residue_policy: ResiduePolicy = ResiduePolicy.PAYER):
        self.residue_policy = residue_policy
        self._groups: dict[str, Group] = {}
        self._lock = threading.Lock()

    def create_group(self, name: str = None) -> Group:
        """Create an empty group; the name defaults to the generated id."""
        group_id = _generate_group_id()
        group = Group(group_id, (name or "").strip() or group_id, Ledger(self.residue_policy))
        with self._lock:
            self._groups[group_id] = group
        logger.info("Created group %s (%s)", group_id, group.name)
        return group

    def get_group(self, group_id: str) -> Group:
        """
        Raises:
            UnknownGroup: If no group has this id.
        """
        with self._lock:
            group = self._groups.get(group_id)
        if group is None:
            raise UnknownGroup(group_id)
        return group

    def get_ledger(self, group_id: str) -> Ledger:
        return self.get_group(group_id).ledger

    def list_groups(self) -> list[Group]:
        with self._lock:
            return list(self._groups.values())
