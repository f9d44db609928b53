"""
Application Constants
Defines constant values used throughout the application.

This module contains all application-wide constants including:
- Lookup source id prefixes and kinds
- Field types recognised by the lookup normalizer
- Implicit fields every dynamic lookup source exposes
"""

# Lookup source kinds
SOURCE_TYPE_STATIC = "static"  # Built-in in-memory catalog
SOURCE_TYPE_MODULE = "module"  # All forms under one module
SOURCE_TYPE_FORM = "form"  # One form's submitted records

VALID_SOURCE_TYPES = [SOURCE_TYPE_STATIC, SOURCE_TYPE_MODULE, SOURCE_TYPE_FORM]

# Lookup source id prefixes (the prefix encodes the origin kind)
STATIC_SOURCE_PREFIX = "lookup_"
MODULE_SOURCE_PREFIX = "module_"
FORM_SOURCE_PREFIX = "form_"

# Lookup field relation id prefix: lfr_{source_id}_{field_id}
RELATION_ID_PREFIX = "lfr_"

# Field types
FIELD_TYPE_LOOKUP = "lookup"

# Fields every form/module source is assumed to expose, even with no submissions
IMPLICIT_SOURCE_FIELDS = ["id", "name", "title", "description", "createdAt", "updatedAt"]

# Catalog icons
MODULE_SOURCE_ICON = "\U0001f4c1"  # folder
FORM_SOURCE_ICON = "\U0001f4c4"  # page
DEFAULT_STATIC_ICON = "\U0001f4cb"  # clipboard

# Module sources pull at most limit // MODULE_PER_FORM_DIVISOR records per child form
MODULE_PER_FORM_DIVISOR = 10
