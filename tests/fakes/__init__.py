# Fake implementations for testing

from .fake_apihub import FakeApihub, form_fields, make_operations

__all__ = ["FakeApihub", "form_fields", "make_operations"]
