"""Packing of tasks into messages under BPD and passport limits."""

from ..logging_config import get_logger
from ..passport import IPassport
from ..tasks import ITask

logger = get_logger(__name__)


class GVLedger:
    """Segment count per transaction code in the current tail message."""

    def __init__(self):
        self._counts: dict[str, int] = {}

    def count(self, hbci_code: str) -> int:
        return self._counts.get(hbci_code, 0)

    def distinct_types(self) -> int:
        return len(self._counts)

    def total(self) -> int:
        return sum(self._counts.values())

    def set(self, hbci_code: str, count: int) -> None:
        self._counts[hbci_code] = count

    def clear(self) -> None:
        self._counts.clear()

    def as_dict(self) -> dict[str, int]:
        return dict(self._counts)

    def __contains__(self, hbci_code: object) -> bool:
        return hbci_code in self._counts

    def __len__(self) -> int:
        return len(self._counts)


class PackingPolicy:
    """Decides whether a task still fits into the tail message.

    Three limits apply, each ignored when 0: distinct transaction types per
    message (BPD), segments of one type per message (BPD, per task) and
    segments in total (passport).
    """

    def __init__(self, passport: IPassport):
        self._passport = passport

    def needs_new_message(self, ledger: GVLedger, task: ITask) -> bool:
        """Project the ledger after adding task and check every finite limit."""
        hbci_code = task.hbci_code

        same_type_count = ledger.count(hbci_code) + 1
        total_segs = ledger.total() + 1
        distinct_types = ledger.distinct_types()
        if hbci_code not in ledger:
            distinct_types += 1

        logger.debug("there are currently %s GV segs in this message", total_segs - 1)

        max_types = self._passport.max_gv_per_msg()
        max_same = task.max_number_per_msg
        max_total = self._passport.max_gv_segs_per_msg()

        if max_total > 0 and total_segs > max_total:
            logger.debug(
                "have to generate new message because current type of passport "
                "only allows %s GV segs per message",
                max_total,
            )
            return True

        if (max_types > 0 and distinct_types > max_types) or (
            max_same > 0 and same_type_count > max_same
        ):
            logger.debug(
                "have to generate new message because of BPD restrictions for "
                "number of tasks per message"
            )
            return True

        return False
