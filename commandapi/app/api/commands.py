import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.command import Command
from ..schemas.command import CommandCreate, CommandOut, CommandUpdate
from ..utils.dependencies import get_current_user
from ..utils.error_handlers import NotFoundError, ValidationError, get_error_message, handle_database_error

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/commands",
    tags=["Commands"],
    dependencies=[Depends(get_current_user)],
)


# Ids outside the INTEGER column range cannot match a row.
MIN_COMMAND_ID = -(2**31)
MAX_COMMAND_ID = 2**31 - 1


def _find_command(db: Session, command_id: int) -> Command | None:
    if not MIN_COMMAND_ID <= command_id <= MAX_COMMAND_ID:
        return None
    return db.get(Command, command_id)


@router.get("", response_model=list[CommandOut])
def get_command_items(db: Session = Depends(get_db)):
    return db.query(Command).order_by(Command.id.asc()).all()


@router.get("/{command_id}", response_model=CommandOut, name="get_command_item")
def get_command_item(command_id: int, db: Session = Depends(get_db)):
    command = _find_command(db, command_id)
    if command is None:
        logger.info("Command %s not found", command_id)
        raise NotFoundError(get_error_message("command_not_found"))
    return command


@router.post("", response_model=CommandOut, status_code=201)
def post_command_item(
    payload: CommandCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    command = Command(
        how_to=payload.how_to,
        platform=payload.platform,
        command_line=payload.command_line,
    )
    try:
        db.add(command)
        db.commit()
        db.refresh(command)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating command")

    logger.info("Created command id=%s platform=%s", command.id, command.platform)
    response.headers["Location"] = str(request.url_for("get_command_item", command_id=command.id))
    return command


@router.put("/{command_id}", status_code=204)
def put_command_item(command_id: int, payload: CommandUpdate, db: Session = Depends(get_db)):
    if payload.id != command_id:
        logger.warning("Rejected update: route id=%s body id=%s", command_id, payload.id)
        raise ValidationError(get_error_message("command_id_mismatch"))

    command = _find_command(db, command_id)
    if command is None:
        raise NotFoundError(get_error_message("command_not_found"))

    command.how_to = payload.how_to
    command.platform = payload.platform
    command.command_line = payload.command_line
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "updating command")

    logger.info("Updated command id=%s", command_id)
    return Response(status_code=204)


@router.delete("/{command_id}", response_model=CommandOut)
def delete_command_item(command_id: int, db: Session = Depends(get_db)):
    command = _find_command(db, command_id)
    if command is None:
        # Deleting a missing command is a no-op that still reports 200.
        logger.info("Delete requested for missing command id=%s", command_id)
        return Response(status_code=200)

    deleted = CommandOut.model_validate(command)
    try:
        db.delete(command)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "deleting command")

    logger.info("Deleted command id=%s", command_id)
    return deleted
