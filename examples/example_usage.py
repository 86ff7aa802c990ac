"""Example: use the service layer directly, without Flask."""

import importlib
from datetime import datetime

from config import get_settings_module

from src.studio_ledger.studio_ledger.attendance.churn import detect_churn_risk
from src.studio_ledger.studio_ledger.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    state = container.load_state()

    for person in detect_churn_risk(state.people, state.attendance, state.sessions):
        print(f"at risk: {person.name} ({person.phone})")

    for reminder in container.payment_service.reminders(state, now=datetime.now()):
        print(f"due in {reminder.days_until_due} day(s): {reminder.person.name}")

    print(container.suggestion_provider.suggest(state).message)


if __name__ == "__main__":
    main()
