"""
Trellis CLI (cli/)

Tests the routes and check commands against controller modules written
to a temporary import root.
"""

import textwrap
import pytest
from click.testing import CliRunner

from trellis.cli.__main__ import cli
from trellis.cli.discovery import discover_controllers


GOOD_CONTROLLERS = """
from trellis import AppController, POST, RESTful


class BooksController(AppController):
    def index(self):
        pass

    @POST
    def save(self):
        pass


@RESTful
class PhotosController(AppController):
    def index(self):
        pass

    def destroy(self):
        pass
"""

BAD_CONTROLLERS = """
from trellis import AppController, GET, POST, RESTful


class BooksController(AppController):
    def index(self):
        pass

    @GET
    @POST
    def both(self):
        pass


@RESTful
class PhotosController(AppController):
    def archive(self):
        pass
"""

IMPORTING_CONTROLLERS = """
from {module} import BooksController
from trellis import AppController


class NotesController(AppController):
    def index(self):
        pass
"""


@pytest.fixture
def app_root(tmp_path, request):
    """Import root; module names are unique per test to avoid sys.modules reuse."""
    suffix = request.node.name.replace("[", "_").replace("]", "_").replace("-", "_")

    def write(name, source):
        module = f"{name}_{suffix}"
        (tmp_path / f"{module}.py").write_text(textwrap.dedent(source))
        return module

    return tmp_path, write


def invoke(root, *args):
    return CliRunner().invoke(cli, ["--path", str(root), *args], obj={})


# ============================================================================
# Discovery
# ============================================================================

class TestDiscovery:

    def test_collects_defined_controllers(self, app_root):
        root, write = app_root
        books = write("books", GOOD_CONTROLLERS)
        notes = write("notes", IMPORTING_CONTROLLERS.format(module=books))

        controllers = discover_controllers([notes], search_path=str(root))
        assert [c.__name__ for c in controllers] == ["NotesController"]

    def test_import_error(self, app_root):
        root, _ = app_root
        with pytest.raises(ImportError):
            discover_controllers(["no_such_module_xyz"], search_path=str(root))


# ============================================================================
# routes
# ============================================================================

class TestRoutesCommand:

    def test_lists_actions(self, app_root):
        root, write = app_root
        module = write("controllers", GOOD_CONTROLLERS)

        result = invoke(root, "routes", module)

        assert result.exit_code == 0, result.output
        assert "Controller" in result.output
        assert "/books/save" in result.output
        assert "POST" in result.output
        assert "/photos/destroy" in result.output
        assert "DELETE" in result.output

    def test_reports_faults(self, app_root):
        root, write = app_root
        module = write("controllers", BAD_CONTROLLERS)

        result = invoke(root, "routes", module)

        assert result.exit_code == 1
        assert "/books/index" in result.output
        assert "more than one HTTP method" in result.output

    def test_modules_required(self, app_root):
        root, _ = app_root
        result = invoke(root, "routes")
        assert result.exit_code == 2


# ============================================================================
# check
# ============================================================================

class TestCheckCommand:

    def test_valid(self, app_root):
        root, write = app_root
        module = write("controllers", GOOD_CONTROLLERS)

        result = invoke(root, "check", module)

        assert result.exit_code == 0, result.output
        assert "2 controller(s), 4 action(s) OK" in result.output

    def test_quiet(self, app_root):
        root, write = app_root
        module = write("controllers", GOOD_CONTROLLERS)

        result = CliRunner().invoke(cli, ["--quiet", "--path", str(root), "check", module], obj={})

        assert result.exit_code == 0
        assert result.output == ""

    def test_misconfigured(self, app_root):
        root, write = app_root
        module = write("controllers", BAD_CONTROLLERS)

        result = invoke(root, "check", module)

        assert result.exit_code == 1
        assert "[MULTIPLE_METHOD_MARKERS]" in result.output
        assert "[UNSUPPORTED_RESTFUL_ACTION]" in result.output
        assert "2 misconfigured action(s)" in result.output

    def test_import_failure(self, app_root):
        root, _ = app_root
        result = invoke(root, "check", "no_such_module_xyz")
        assert result.exit_code == 2
        assert "Cannot import controllers" in result.output

    def test_no_controllers(self, app_root):
        root, write = app_root
        module = write("empty", "VALUE = 1\n")

        result = invoke(root, "check", module)

        assert result.exit_code == 0
        assert "No controllers found" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
