import logging
from typing import List, Set
from hearth.models.permission import Permission, TagPermission
from hearth.models.tag import Tag
from hearth.repositories.unit_of_work import UnitOfWorkContext
from hearth.services.task_tag_manager import TaskTagManager
from hearth.core.exception import ResourceNotFoundException

logger = logging.getLogger(__name__)


class TagPermissionManager:
    """
    Per-member tag visibility.

    A household member sees a task when the task carries no tags, or when at
    least one of its tags has been granted to the member's Permission record.
    Grants are additive; nothing here revokes them.
    """

    def __init__(self, task_tag_manager: TaskTagManager):
        self.task_tag_manager = task_tag_manager

    def create_permissions_with_tags(
        self,
        context: UnitOfWorkContext,
        household_member_id: str,
        tag_ids: List[str],
    ) -> Permission:
        """
        Create the Permission record of a household member and grant each tag.

        Intended for members that have no Permission yet.
        """
        permission = context.permissions.create(
            Permission(household_member_id=household_member_id)
        )

        for tag_id in tag_ids:
            context.tag_permissions.create(
                TagPermission(permission_id=permission.id, tag_id=tag_id)
            )

        logger.info(
            f"Created permission {permission.id} for household member "
            f"{household_member_id} with {len(tag_ids)} tag(s)"
        )
        return permission

    def give_tag_permissions_to_member(
        self,
        context: UnitOfWorkContext,
        household_member_id: str,
        tag_ids: List[str],
    ) -> List[TagPermission]:
        """
        Grant tags to a member that already has a Permission record.
        Tags already granted are skipped.

        Returns:
            The newly created grants

        Raises:
            ResourceNotFoundException: If the member has no Permission record
        """
        permission = context.permissions.find_by_household_member_id(household_member_id)
        if permission is None:
            raise ResourceNotFoundException(
                "Permission",
                message=f"No permission record found for household member {household_member_id}",
            )

        granted = self._get_viewable_tag_ids(context, permission.id)
        created = []
        for tag_id in tag_ids:
            if tag_id in granted:
                continue
            created.append(
                context.tag_permissions.create(
                    TagPermission(permission_id=permission.id, tag_id=tag_id)
                )
            )
            granted.add(tag_id)

        if created:
            logger.info(
                f"Granted {len(created)} tag(s) to household member {household_member_id}"
            )
        return created

    def filter_tasks_by_tag_permissions(
        self,
        context: UnitOfWorkContext,
        household_member_id: str,
        task_ids: List[str],
    ) -> List[str]:
        """
        Keep the task IDs the member may see, in their original order.

        Untagged tasks are always kept. Tagged tasks are kept when at least
        one of their tags is viewable; without a Permission record no tag is.
        """
        if not task_ids:
            return []

        viewable_tag_ids = self.get_user_viewable_tag_ids(context, household_member_id)
        tags_by_task = self.task_tag_manager.get_tasks_tags(context, task_ids)

        visible = []
        for task_id in task_ids:
            task_tag_ids = [tag.id for tag in tags_by_task.get(task_id, [])]
            if not task_tag_ids or any(tag_id in viewable_tag_ids for tag_id in task_tag_ids):
                visible.append(task_id)
        return visible

    def get_user_viewable_tags(
        self,
        context: UnitOfWorkContext,
        household_member_id: str,
    ) -> List[Tag]:
        """Get the Tag rows the member has been granted."""
        viewable_tag_ids = self.get_user_viewable_tag_ids(context, household_member_id)
        if not viewable_tag_ids:
            return []
        return sorted(context.tags.find_by_ids(list(viewable_tag_ids)), key=lambda tag: tag.name)

    def get_user_viewable_tag_ids(
        self,
        context: UnitOfWorkContext,
        household_member_id: str,
    ) -> Set[str]:
        """Get the IDs of the tags granted to the member (empty without a Permission)."""
        permission = context.permissions.find_by_household_member_id(household_member_id)
        if permission is None:
            return set()
        return self._get_viewable_tag_ids(context, permission.id)

    def _get_viewable_tag_ids(self, context: UnitOfWorkContext, permission_id: str) -> Set[str]:
        return {
            tag_permission.tag_id
            for tag_permission in context.tag_permissions.find_by_permission_id(permission_id)
        }
