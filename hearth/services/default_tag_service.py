from typing import List
from hearth.models.tag import Tag
from hearth.repositories.unit_of_work import UnitOfWorkContext

DEFAULT_TAGS = [
    ("metas", "#4ECDC4"),
    ("adult", "#FF6B6B"),
    ("work", "#45B7D1"),
    ("kids", "#96CEB4"),
    ("chores", "#FFEAA7"),
]


class DefaultTagService:
    """Seeds the starter tags of a new household."""

    def create_default_tags(self, context: UnitOfWorkContext, household_id: str) -> List[Tag]:
        return [
            context.tags.create(Tag(name=name, color=color, household_id=household_id))
            for name, color in DEFAULT_TAGS
        ]
