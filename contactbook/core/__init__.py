"""
Cross-cutting primitives for the contact book backend.

Settings and logging setup live here so that repositories, services and
routers never read os.environ or install handlers themselves.
"""
