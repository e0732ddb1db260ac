"""
Project persistence module.

Converts imported datasets to and from the JSON project format, including
the compact header/rows layout.
"""
