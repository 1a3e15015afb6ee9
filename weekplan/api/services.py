"""Wiring of repositories, generator and state machine for the web layer."""
import random
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional

from weekplan.events.audit_log import AuditLogRecorder
from weekplan.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS
from weekplan.infra.Catalog_Repository import CatalogRepository
from weekplan.infra.Family_Repository import FamilyRepository
from weekplan.infra.Plan_Repository import PlanRepository
from weekplan.logic.generation.generator import PlanGenerator
from weekplan.logic.lifecycle.state_machine import PlanStateMachine
from weekplan.utilities.config import DATA_DIR, RANDOM_SEED


class Services:
    def __init__(self, data_dir: Optional[Path] = None, rng: Optional[random.Random] = None,
                 bus: Optional[EventBus] = None, clock: Callable[[], datetime] = datetime.now):
        self.bus = bus or GLOBAL_EVENT_BUS
        self.catalog = CatalogRepository(data_dir)
        self.families = FamilyRepository(data_dir)
        self.plans = PlanRepository(data_dir)
        self.generator = PlanGenerator(self.catalog, self.families, self.plans,
                                       rng=rng or random.Random(RANDOM_SEED), bus=self.bus)
        self.audit_log = AuditLogRecorder(self.bus)
        self.audit_log.start()
        self.lifecycle = PlanStateMachine(self.plans, self.families, self.catalog,
                                          generator=self.generator, bus=self.bus,
                                          audit_log=self.audit_log, clock=clock)

    def close(self):
        self.audit_log.stop()


@lru_cache(maxsize=1)
def get_services() -> Services:
    return Services(DATA_DIR)
