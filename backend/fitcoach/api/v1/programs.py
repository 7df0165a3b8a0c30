"""Program marketplace endpoints: coach authoring plus client enrollment."""

from __future__ import annotations

from flask import Blueprint, request

from fitcoach.api.deps import (
    current_context,
    json_body,
    json_response,
    parse_pagination,
    require_auth,
    require_role,
    timing,
)
from fitcoach.api.etag import read_if_match, set_response_etag
from fitcoach.models.user import ROLE_CLIENT, ROLE_COACH
from fitcoach.schemas import (
    EnrollmentSchema,
    ProgramCreateSchema,
    ProgramListQuerySchema,
    ProgramSchema,
    ProgramUpdateSchema,
    build_meta,
)
from fitcoach.services.enrollments import EnrollmentService
from fitcoach.services.programs import (
    ProgramCreateIn,
    ProgramListIn,
    ProgramService,
    ProgramUpdateIn,
)

bp = Blueprint("programs", __name__)

program_schema = ProgramSchema()
program_list_schema = ProgramSchema(many=True)
program_create_schema = ProgramCreateSchema()
program_update_schema = ProgramUpdateSchema()
program_filter_schema = ProgramListQuerySchema()
enrollment_schema = EnrollmentSchema()


@bp.get("")
@require_auth
@timing
def list_programs():
    """Return visible programs, filtered by ``type``, ``coach_id`` or ``mine``."""

    filters = program_filter_schema.load(request.args)
    pagination = parse_pagination()
    result = ProgramService().list(
        current_context(),
        ProgramListIn(
            page=pagination.page,
            limit=pagination.limit,
            sort=pagination.sort,
            **filters,
        ),
    )
    data = program_list_schema.dump(result.items)
    return json_response({"data": data, "meta": build_meta(result.meta)})


@bp.post("")
@require_role(ROLE_COACH)
@timing
def create_program():
    """Create a program together with its type-specific payload."""

    payload = program_create_schema.load(json_body())
    program = ProgramService().create(current_context(), ProgramCreateIn(**payload))
    response = json_response({"data": program_schema.dump(program)}, status=201)
    return set_response_etag(response, program)


@bp.get("/<int:program_id>")
@require_auth
@timing
def get_program(program_id: int):
    """Return one program visible to the caller."""

    program = ProgramService().get(current_context(), program_id)
    response = json_response({"data": program_schema.dump(program)})
    return set_response_etag(response, program)


@bp.route("/<int:program_id>", methods=["PUT", "PATCH"])
@require_role(ROLE_COACH)
@timing
def update_program(program_id: int):
    """Partially update an owned program; honours ``If-Match``."""

    payload = program_update_schema.load(json_body())
    dto = ProgramUpdateIn(program_id=program_id, if_match=read_if_match(), **payload)
    program = ProgramService().update(current_context(), dto)
    response = json_response({"data": program_schema.dump(program)})
    return set_response_etag(response, program)


@bp.delete("/<int:program_id>")
@require_role(ROLE_COACH)
@timing
def delete_program(program_id: int):
    """Delete an owned program and everything hanging off it."""

    result = ProgramService().delete(current_context(), program_id)
    return json_response({"data": {"program_id": result.program_id, "deleted": result.deleted}})


@bp.post("/<int:program_id>/enroll")
@require_role(ROLE_CLIENT)
@timing
def enroll(program_id: int):
    """Enroll the calling client in a program."""

    enrollment = EnrollmentService().enroll(current_context(), program_id)
    return json_response({"data": enrollment_schema.dump(enrollment)}, status=201)
