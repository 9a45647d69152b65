from typing import Dict, List
from hearth.models.tag import Tag
from hearth.repositories.unit_of_work import UnitOfWorkContext
from hearth.core.exception import ValidationException


class TaskTagManager:
    """Maintains and reads the task to tag associations."""

    def assign_tags_to_task(
        self,
        context: UnitOfWorkContext,
        task_id: str,
        tag_ids: List[str],
    ) -> List[Tag]:
        """
        Replace the tags of a task.

        Every tag must exist and belong to the task's household.

        Returns:
            The tags now attached, in the order requested
        """
        context.task_tags.delete_by_task_id(task_id)

        # Repeated IDs collapse to one link
        tag_ids = list(dict.fromkeys(tag_ids))
        if not tag_ids:
            return []

        task = context.tasks.find_by_id(task_id)
        if task is None:
            raise ValidationException(f"Task with ID {task_id} not found")

        tags_by_id = {tag.id: tag for tag in context.tags.find_by_ids(tag_ids)}
        missing = [tag_id for tag_id in tag_ids if tag_id not in tags_by_id]
        if missing:
            raise ValidationException(f"Tag {missing[0]} not found")

        for tag in tags_by_id.values():
            if tag.household_id != task.household_id:
                raise ValidationException(
                    f"Tag {tag.id} does not belong to the same household as task {task_id}"
                )

        context.task_tags.create_many(task_id, tag_ids)
        return [tags_by_id[tag_id] for tag_id in tag_ids]

    def get_task_tags(self, context: UnitOfWorkContext, task_id: str) -> List[Tag]:
        """Get the tags attached to one task."""
        return context.tags.find_by_ids(context.task_tags.find_by_task_id(task_id))

    def get_tasks_tags(
        self,
        context: UnitOfWorkContext,
        task_ids: List[str],
    ) -> Dict[str, List[Tag]]:
        """
        Get the tags of many tasks with one association query and one tag query.

        Returns:
            Every requested task ID mapped to its tags (empty list when untagged)
        """
        if not task_ids:
            return {}

        tag_ids_by_task = context.task_tags.find_by_task_ids(task_ids)
        all_tag_ids = {tag_id for tag_ids in tag_ids_by_task.values() for tag_id in tag_ids}
        tags = context.tags.find_by_ids(list(all_tag_ids)) if all_tag_ids else []
        tag_map = {tag.id: tag for tag in tags}

        return {
            task_id: [
                tag_map[tag_id]
                for tag_id in tag_ids_by_task.get(task_id, [])
                if tag_id in tag_map
            ]
            for task_id in task_ids
        }
