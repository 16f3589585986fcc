"""ViewModel package for screen state and command surfaces.

Call context:
    ``naulify.app.container`` builds the view models; screens subscribe to
    their observables and call their command methods.

Dependencies:
    Modules in this package depend on domain types and repository protocols
    only. Transport and persistence stay in adapters and repositories.

Responsibilities:
    - Publish screen state as closed state unions through ``Observable``.
    - Run each command as one task owned by the view model's ``TaskScope``.
    - Validate operator input before any repository call.
"""

from .auth_vm import AuthVM
from .profile_vm import ProfileVM
from .route_vm import RouteVM

__all__ = ["AuthVM", "ProfileVM", "RouteVM"]
