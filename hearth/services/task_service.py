import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from hearth.models.tag import Tag
from hearth.models.task import Task, TaskStatus
from hearth.repositories.unit_of_work import UnitOfWork, UnitOfWorkContext
from hearth.schemas.task import TaskCreate, TaskUpdate, TaskFilter
from hearth.services.household_member_validator import HouseholdMemberValidator
from hearth.services.task_tag_manager import TaskTagManager
from hearth.services.tag_permission_manager import TagPermissionManager
from hearth.core.exception import (
    BadRequestException,
    DuplicateResourceException,
    ResourceNotFoundException,
)

logger = logging.getLogger(__name__)


def task_view(task: Task, tags: List[Tag]) -> dict:
    """Flatten a task and its tag IDs for responses."""
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "due_date": task.due_date,
        "status": task.status,
        "completed_at": task.completed_at,
        "created_by_id": task.created_by_id,
        "household_id": task.household_id,
        "tag_ids": [tag.id for tag in tags],
    }


def resolve_completed_at(
    status: TaskStatus,
    previous_status: Optional[TaskStatus] = None,
    previous_completed_at: Optional[datetime] = None,
) -> Optional[datetime]:
    """
    Completion timestamp after a status change: stamped on entering
    COMPLETED, kept while it stays there, cleared on leaving.
    """
    if status != TaskStatus.COMPLETED:
        return None
    if previous_status == TaskStatus.COMPLETED and previous_completed_at is not None:
        return previous_completed_at
    return datetime.now(timezone.utc)


def _check_range(field: str, start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is None or end is None:
        return
    # Naive bounds are read as UTC
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    if end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)
    if end < start:
        raise BadRequestException(f"{field}_to must not be before {field}_from")


class TaskService:
    """Service layer for household task operations."""

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        validator: HouseholdMemberValidator,
        task_tag_manager: TaskTagManager,
        tag_permission_manager: TagPermissionManager,
    ):
        self.unit_of_work = unit_of_work
        self.validator = validator
        self.task_tag_manager = task_tag_manager
        self.tag_permission_manager = tag_permission_manager

    def create_task(self, member_id: str, data: TaskCreate) -> dict:
        """
        Create a task in a household the member is active in.

        Raises:
            DuplicateResourceException: If a task with the requested ID exists
            ValidationException: If a tag is unknown or from another household
        """
        with self.unit_of_work.transaction() as context:
            self.validator.validate(context, data.household_id, member_id)

            if context.tasks.find_by_id(data.id) is not None:
                raise DuplicateResourceException("Task", data.id)

            task = context.tasks.create(
                Task(
                    id=data.id,
                    title=data.title,
                    description=data.description,
                    due_date=data.due_date,
                    status=data.status,
                    completed_at=resolve_completed_at(data.status),
                    created_by_id=member_id,
                    household_id=data.household_id,
                )
            )
            tags = self.task_tag_manager.assign_tags_to_task(context, task.id, data.tag_ids)

            logger.info(f"Member {member_id} created task {task.id} in household {task.household_id}")
            return task_view(task, tags)

    def get_tasks(self, member_id: str, filters: TaskFilter) -> List[dict]:
        """
        List the tasks the member may see.

        Without household IDs every household the member is active in is
        searched. Tagged tasks are filtered per household by the member's
        tag permissions.

        Raises:
            BadRequestException: If a date range ends before it starts
        """
        _check_range("due_date", filters.due_date_from, filters.due_date_to)
        _check_range("completed_date", filters.completed_date_from, filters.completed_date_to)

        with self.unit_of_work.transaction() as context:
            if filters.household_ids:
                household_ids = list(dict.fromkeys(filters.household_ids))
            else:
                household_ids = [
                    household.id
                    for household in context.households.find_by_member_id(member_id)
                ]

            household_member_ids: Dict[str, str] = {}
            for household_id in household_ids:
                household_member = self.validator.validate(context, household_id, member_id)
                household_member_ids[household_id] = household_member.id

            tasks = context.tasks.find_by_household_ids_with_date_filters(
                household_ids,
                due_date_from=filters.due_date_from,
                due_date_to=filters.due_date_to,
                completed_date_from=filters.completed_date_from,
                completed_date_to=filters.completed_date_to,
            )

            visible_ids = set()
            for household_id, household_member_id in household_member_ids.items():
                household_task_ids = [task.id for task in tasks if task.household_id == household_id]
                visible_ids.update(
                    self.tag_permission_manager.filter_tasks_by_tag_permissions(
                        context, household_member_id, household_task_ids
                    )
                )

            visible = [task for task in tasks if task.id in visible_ids]
            tags_by_task = self.task_tag_manager.get_tasks_tags(
                context, [task.id for task in visible]
            )
            return [task_view(task, tags_by_task.get(task.id, [])) for task in visible]

    def get_task(self, member_id: str, task_id: str) -> dict:
        """
        Get one task.

        Raises:
            ResourceNotFoundException: If the task does not exist or is hidden
                from the member by tag permissions
        """
        with self.unit_of_work.transaction() as context:
            task = self._get_visible_task(context, member_id, task_id)
            return task_view(task, self.task_tag_manager.get_task_tags(context, task.id))

    def update_task(self, member_id: str, task_id: str, data: TaskUpdate) -> dict:
        """
        Replace a task's editable fields and tags.

        Raises:
            ResourceNotFoundException: If the task does not exist or is hidden
            ValidationException: If a tag is unknown or from another household
        """
        with self.unit_of_work.transaction() as context:
            task = self._get_visible_task(context, member_id, task_id)

            completed_at = resolve_completed_at(data.status, task.status, task.completed_at)
            task = context.tasks.update(
                task_id,
                {
                    "title": data.title,
                    "description": data.description,
                    "due_date": data.due_date,
                    "status": data.status,
                    "completed_at": completed_at,
                },
            )
            tags = self.task_tag_manager.assign_tags_to_task(context, task.id, data.tag_ids)

            logger.info(f"Member {member_id} updated task {task_id}")
            return task_view(task, tags)

    def delete_task(self, member_id: str, task_id: str) -> None:
        """
        Delete a task together with its tag links.

        Raises:
            ResourceNotFoundException: If the task does not exist or is hidden
        """
        with self.unit_of_work.transaction() as context:
            self._get_visible_task(context, member_id, task_id)

            context.task_tags.delete_by_task_id(task_id)
            context.tasks.delete_by_id(task_id)

            logger.info(f"Member {member_id} deleted task {task_id}")

    def _get_visible_task(self, context: UnitOfWorkContext, member_id: str, task_id: str) -> Task:
        task = context.tasks.find_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException("Task", task_id)

        household_member = self.validator.validate(context, task.household_id, member_id)

        # Hidden tasks are reported exactly like missing ones
        if not self.tag_permission_manager.filter_tasks_by_tag_permissions(
            context, household_member.id, [task.id]
        ):
            raise ResourceNotFoundException("Task", task_id)
        return task
