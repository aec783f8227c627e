"""Tests for path-based role detection."""

from __future__ import annotations

import pytest

from laracheck.rules.models import FileRole, Target
from laracheck.scanner.classify import classify


@pytest.mark.parametrize(
    ("path", "role"),
    [
        ("app/Http/Controllers/PostController.php", FileRole.CONTROLLER),
        ("app/Http/Controllers/Admin/UserController.php", FileRole.CONTROLLER),
        ("./app/Http/Controllers/PostController.php", FileRole.CONTROLLER),
        ("app/Http/Controllers/Controller.php", FileRole.UNKNOWN),
        ("app/Http/Controllers/helpers.php", FileRole.UNKNOWN),
        ("app/Http/Requests/StorePostRequest.php", FileRole.REQUEST),
        ("app/Http/Resources/PostResource.php", FileRole.RESOURCE),
        ("app/Models/Post.php", FileRole.MODEL),
        ("app/Services/Billing/InvoiceService.php", FileRole.SERVICE),
        ("routes/web.php", FileRole.UNKNOWN),
        ("config/app.php", FileRole.UNKNOWN),
        ("resources/views/app.blade.php", FileRole.UNKNOWN),
        ("resources/js/Pages/Posts/Index.vue", FileRole.PAGE),
        ("resources/js/pages/dashboard.vue", FileRole.PAGE),
        ("resources/js/Components/UserBio.vue", FileRole.COMPONENT),
        ("resources/js/Layouts/AppLayout.vue", FileRole.COMPONENT),
        ("resources/js/app.ts", FileRole.SCRIPT),
        ("resources/js/composables/useTheme.js", FileRole.SCRIPT),
        ("resources/js/types/global.d.ts", FileRole.UNKNOWN),
        ("docs/Example.vue", FileRole.UNKNOWN),
        ("vite.config.ts", FileRole.UNKNOWN),
    ],
)
def test_classify(path: str, role: FileRole):
    assert classify(path) == role


def test_role_targets():
    assert FileRole.CONTROLLER.target == Target.BACKEND
    assert FileRole.SERVICE.target == Target.BACKEND
    assert FileRole.PAGE.target == Target.FRONTEND
    assert FileRole.SCRIPT.target == Target.FRONTEND
    assert FileRole.UNKNOWN.target is None
