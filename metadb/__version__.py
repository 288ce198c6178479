"""Version information for metadb."""

# Semantic versioning: MAJOR.MINOR.PATCH
# MAJOR: Breaking changes to the document formats or engine API
# MINOR: New features, backward compatible
# PATCH: Bug fixes, backward compatible

__version__ = "0.2.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.2.0 - Cross-library migration and duplicate search
#         - migrate_entry moves file and entry between libraries
#         - find_duplicates groups byte-identical files across libraries
#         - Layered configuration (YAML + METADB_* env vars)
# 0.1.0 - Initial release
#         - Libraries, entry store and metadata mirror
#         - Content index and missing file resolution
