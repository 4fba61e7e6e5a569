# qms_core/management/commands/check_workflow_rules.py

from django.core.management.base import BaseCommand, CommandError

from qms_core.workflows import RULES
from qms_core.workflows.integrity import find_cycle, machine_problems


class Command(BaseCommand):
    help = "Validate the status workflow rule table"

    def add_arguments(self, parser):
        parser.add_argument(
            "--machine",
            help="Only check this machine identifier (e.g. taskStatus).",
        )

    def handle(self, *args, **options):
        only = options.get("machine")

        if only and only not in RULES:
            raise CommandError(
                f"Unknown workflow machine '{only}'. Known: {', '.join(RULES)}"
            )

        self.stdout.write("Checking workflow rule table…\n")

        errors_found = False

        for machine_id, machine in RULES.items():
            if only and machine_id != only:
                continue

            problems = machine_problems(machine)
            if problems:
                self.stderr.write(f"[ERROR] {machine_id}")
                for problem in problems:
                    self.stderr.write(f"        {problem}")
                errors_found = True
                continue

            cycle = find_cycle(machine)
            loops = f", rework loop {' -> '.join(cycle)}" if cycle else ""
            self.stdout.write(
                f"[OK] {machine_id}: {len(machine.states)} states, "
                f"terminal {', '.join(machine.terminal_states) or 'none'}{loops}"
            )

        if errors_found:
            self.stderr.write("\nWorkflow rule validation FAILED.")
            raise CommandError("One or more workflow machines are invalid.")

        self.stdout.write("\nAll workflow machines validated successfully.")
