# qms_core/checks/workflow_rules.py

from django.core.checks import Error, Warning, register

from qms_core.workflows import RULES
from qms_core.workflows.integrity import find_cycle, machine_problems


@register()
def check_workflow_rules(app_configs, **kwargs):
    """
    Django system check for the status rule table.
    """
    errors = []

    if not RULES:
        errors.append(
            Error(
                "Workflow rule table is empty",
                id="qms_core.E001",
            )
        )
        return errors

    for machine_id, machine in RULES.items():
        # 1. Structural invariants
        for problem in machine_problems(machine):
            errors.append(
                Error(
                    f"Workflow machine '{machine_id}' is inconsistent",
                    hint=problem,
                    id="qms_core.E002",
                )
            )

        # 2. Declared rework loops that no longer exist
        if machine.allows_rework and find_cycle(machine) is None:
            errors.append(
                Warning(
                    f"Workflow machine '{machine_id}' allows rework loops but has none",
                    hint="Set allows_rework=False so new cycles are reported.",
                    id="qms_core.W001",
                )
            )

    return errors
