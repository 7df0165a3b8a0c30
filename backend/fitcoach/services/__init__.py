"""Service layer.

Services are framework agnostic: they receive a :class:`ServiceContext`,
run inside a Unit of Work and raise errors from ``_shared.errors``.
Import concrete services from their subpackages (``fitcoach.services.programs``,
``fitcoach.services.logs``, ...).
"""
