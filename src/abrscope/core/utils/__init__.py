from .url import is_absolute_url, is_relative_url, is_valid_base_url, resolve_url

__all__ = [
    'is_absolute_url',
    'is_relative_url',
    'is_valid_base_url',
    'resolve_url',
]
