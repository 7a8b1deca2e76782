"""Category aggregate and its management command."""

import re
from datetime import datetime

from protean import handle, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront


@storefront.event(part_of="Category")
class CategoryCreated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)


@storefront.aggregate
class Category:
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=100, unique=True)
    image: String(max_length=500)
    is_active: Boolean(default=True)
    created_at: DateTime(default=datetime.now)

    @invariant.post
    def slug_must_be_url_safe(self):
        if self.slug and not re.match(r"^[a-z0-9]+(-[a-z0-9]+)*$", self.slug):
            raise ValidationError({"slug": ["Slug must contain only lowercase alphanumeric characters and hyphens"]})

    @classmethod
    def create(cls, name, slug, image=None):
        category = cls(name=name, slug=slug, image=image)
        category.raise_(CategoryCreated(category_id=category.id, name=name, slug=slug))
        return category


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=100)
    image: String(max_length=500)


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        category = Category.create(name=command.name, slug=command.slug, image=command.image)
        current_domain.repository_for(Category).add(category)
        return str(category.id)
