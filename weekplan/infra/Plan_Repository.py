import logging
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Iterator, List, Optional
from weakref import WeakValueDictionary
from weekplan.domain.Plan import WeeklyPlan
from weekplan.infra.json_store import atomic_write, read_json
from weekplan.infra.paths import PLANS_FILENAME, data_file
from weekplan.utilities.exceptions import ConcurrentModification, NotFound

logger = logging.getLogger(__name__)


class PlanRepository:
    """Weekly plans (with meals, components and comments) stored as one JSON document.

    Writes to an existing plan go through ``transaction``: a per-plan lock
    serializes writers in this process, and the stored version is compared with
    the version read before committing so writers from other processes cannot
    silently overwrite each other.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self.plans_file = data_file(PLANS_FILENAME, data_dir)
        self._file_lock = Lock()
        # entries vanish once no transaction holds the lock
        self._plan_locks: "WeakValueDictionary[str, Lock]" = WeakValueDictionary()

    def _read_store(self) -> dict:
        return read_json(self.plans_file, {})

    def _lock_for(self, plan_id: str) -> Lock:
        with self._file_lock:
            lock = self._plan_locks.get(plan_id)
            if lock is None:
                lock = Lock()
                self._plan_locks[plan_id] = lock
            return lock

    def get_plan(self, plan_id: str) -> WeeklyPlan:
        with self._file_lock:
            raw = self._read_store().get(plan_id)
        if raw is None:
            raise NotFound(f"Weekly plan {plan_id} not found")
        return WeeklyPlan.from_dict(raw)

    def list_plans(self, family_id: str) -> List[WeeklyPlan]:
        with self._file_lock:
            store = self._read_store()
        plans = [WeeklyPlan.from_dict(raw) for raw in store.values() if raw.get('family_id') == family_id]
        return sorted(plans, key=lambda p: (p.year, p.week_number))

    def add_plan(self, plan: WeeklyPlan) -> WeeklyPlan:
        with self._file_lock:
            store = self._read_store()
            if plan.id in store:
                raise ConcurrentModification(f"Weekly plan {plan.id} already exists")
            plan.version = 1
            store[plan.id] = plan.to_dict()
            atomic_write(self.plans_file, store)
        logger.info("Weekly plan %s created for family %s", plan.id, plan.family_id)
        return plan

    def _commit(self, plan: WeeklyPlan, read_version: int) -> None:
        with self._file_lock:
            store = self._read_store()
            current = store.get(plan.id)
            if current is None:
                raise NotFound(f"Weekly plan {plan.id} not found")
            if current.get('version', 0) != read_version:
                raise ConcurrentModification(
                    f"Weekly plan {plan.id} changed since it was read (version {read_version})")
            plan.version = read_version + 1
            store[plan.id] = plan.to_dict()
            atomic_write(self.plans_file, store)

    @contextmanager
    def transaction(self, plan_id: str) -> Iterator[WeeklyPlan]:
        """Read a plan, let the caller mutate it, then commit atomically.

        Any exception raised by the caller discards the changes.
        """
        with self._lock_for(plan_id):
            plan = self.get_plan(plan_id)
            read_version = plan.version
            yield plan
            self._commit(plan, read_version)
