# qms_core/serializers_workflow.py
from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers

from qms_core.workflows import (
    InvalidTransitionError,
    TransitionValidator,
    default_validator,
)


class TransitionCheckSerializer(serializers.Serializer):
    """
    Dry-run check of a status change. Never persists anything.

    Context:
      machine   - machine identifier from the URL (required)
      validator - TransitionValidator, defaults to the canonical one
    """

    current = serializers.CharField(trim_whitespace=False)
    requested = serializers.CharField(trim_whitespace=False)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        machine = self.context["machine"]
        validator: TransitionValidator = self.context.get("validator", default_validator)

        try:
            validator.validate(machine, attrs["current"], attrs["requested"])
        except InvalidTransitionError as e:
            raise serializers.ValidationError({"status": str(e)})

        attrs["allowed_next"] = validator.allowed_transitions(machine, attrs["current"])
        return attrs
