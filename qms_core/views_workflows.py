# qms_core/views_workflows.py
import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers_workflow import TransitionCheckSerializer
from .workflows import UnknownMachineError, default_validator

logger = logging.getLogger(__name__)


def _machine_or_404(machine: str):
    try:
        return default_validator.machine(machine)
    except UnknownMachineError as e:
        raise NotFound(str(e))


class HealthCheckView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["System"])
    def get(self, request):
        return Response(
            {
                "status": "ok",
                "service": "QMS",
                "machines": len(default_validator.machine_ids),
            }
        )


class WorkflowListView(APIView):
    """
    Returns definitions of every status machine.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Workflows"])
    def get(self, request):
        return Response(default_validator.definition())


class WorkflowDefinitionView(APIView):
    """
    Returns full workflow definition for a given machine.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Workflows"])
    def get(self, request, machine: str):
        _machine_or_404(machine)
        return Response(default_validator.definition(machine))


class WorkflowNextStatesView(APIView):
    """
    Returns allowed next states given current state.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Workflows"],
        parameters=[
            OpenApiParameter(
                name="current",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=True,
            )
        ],
    )
    def get(self, request, machine: str):
        sm = _machine_or_404(machine)

        current = request.query_params.get("current")
        if not current:
            raise ValidationError({"current": "current query parameter is required."})

        next_states = default_validator.allowed_transitions(machine, current)

        return Response(
            {
                "machine": machine,
                "current": current,
                "known": current in sm.states,
                "allowed_next": next_states,
                "terminal": sm.is_terminal(current),
            }
        )


class WorkflowCheckView(APIView):
    """
    Dry-run validation of a status change. Callers still persist on their own.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Workflows"], request=TransitionCheckSerializer)
    def post(self, request, machine: str):
        _machine_or_404(machine)

        serializer = TransitionCheckSerializer(
            data=request.data,
            context={"request": request, "machine": machine},
        )
        if not serializer.is_valid():
            logger.info(
                "Rejected %s transition check by %s: %s",
                machine,
                request.user,
                serializer.errors,
            )
            raise ValidationError(serializer.errors)

        data = serializer.validated_data
        return Response(
            {
                "machine": machine,
                "current": data["current"],
                "requested": data["requested"],
                "allowed": True,
                "allowed_next": data["allowed_next"],
            }
        )
