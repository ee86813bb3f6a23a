"""Convenience imports for metadata discovery."""

from housedesk.models.category import Category, CategorySample
from housedesk.models.account import Admin, Operator, Organization, Owner, operator_categories
from housedesk.models.ticket import Ticket
from housedesk.models.password_code import PasswordCode  # noqa: F401
