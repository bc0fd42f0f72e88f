"""Example: use the service layer directly, without Flask.

Controllers stay thin; the rules live in the services.
"""

import importlib

from config import get_settings_module

from src.command_console.command_console.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        settings={"ATTENDANCE_POLICY": getattr(settings, "ATTENDANCE_POLICY", None)},
    )
    overview = container.overview_service.get_overview()
    print(f"Classes today: {len(overview.classes_today)}")
    print(f"Tasks due: {len(overview.tasks_due)}")
    if overview.nearest_deadline:
        print(f"Next deadline: {overview.nearest_deadline.title} ({overview.nearest_deadline.date})")
    for stats in overview.subjects_at_risk:
        print(f"{stats.subject_code}: {stats.attendance_percentage}% ({stats.risk_state.value})")


if __name__ == "__main__":
    main()
