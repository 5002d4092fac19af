"""
Controller metadata and markers (controller/metadata.py, controller/decorators.py)

Tests method markers, the RESTful marker, action discovery, controller
paths and the MetadataRegistry.
"""

import pytest

from trellis.controller import (
    AppController,
    ActionMetadata,
    GET, POST, PUT, DELETE,
    HttpMethod,
    MethodMarker,
    RESTful,
    controller_path,
    extract_controller_metadata,
)
from trellis.controller.decorators import declared_methods
from trellis.controller.metadata import action_spellings, canonical_action, underscore
from trellis.faults import ActionNotFoundFault


# ============================================================================
# Markers
# ============================================================================

class TestMethodMarkers:

    def test_marker_records_method(self):
        @POST
        def save(self):
            pass

        assert save.__http_methods__ == [HttpMethod.POST]
        assert declared_methods(save) == (HttpMethod.POST,)

    def test_marker_returns_function_unchanged(self):
        def show(self):
            return "shown"

        assert GET(show) is show

    def test_stacked_markers_in_written_order(self):
        @PUT
        @DELETE
        def both(self):
            pass

        assert declared_methods(both) == (HttpMethod.PUT, HttpMethod.DELETE)

    def test_duplicate_marker_counts_once(self):
        @GET
        @GET
        def show(self):
            pass

        assert declared_methods(show) == (HttpMethod.GET,)

    def test_undecorated_has_no_markers(self):
        def index(self):
            pass

        assert declared_methods(index) == ()

    def test_marker_rejects_non_callables(self):
        with pytest.raises(TypeError):
            POST("not a function")

    def test_marker_repr(self):
        assert isinstance(GET, MethodMarker)
        assert repr(DELETE) == "<MethodMarker DELETE>"


class TestHttpMethod:

    def test_values(self):
        assert [m.value for m in HttpMethod] == ["GET", "POST", "PUT", "DELETE"]

    def test_str(self):
        assert str(HttpMethod.PUT) == "PUT"

    def test_parse_case_insensitive(self):
        assert HttpMethod.parse("post") is HttpMethod.POST

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            HttpMethod.parse("PATCH")


class TestRestfulMarker:

    def test_marks_class(self):
        @RESTful
        class PhotosController(AppController):
            pass

        assert PhotosController.__restful__ is True
        assert PhotosController.restful() is True

    def test_unmarked_class(self):
        class NotesController(AppController):
            pass

        assert NotesController.restful() is False

    def test_rejects_functions(self):
        with pytest.raises(TypeError):
            RESTful(lambda: None)


# ============================================================================
# Naming
# ============================================================================

class TestNaming:

    @pytest.mark.parametrize("name,expected", [
        ("newForm", "new_form"),
        ("editForm", "edit_form"),
        ("new_form", "new_form"),
        ("index", "index"),
        ("BookAuthors", "book_authors"),
        ("HTMLPage", "html_page"),
    ])
    def test_underscore(self, name, expected):
        assert underscore(name) == expected

    def test_controller_path_from_class_name(self):
        class BookAuthorsController(AppController):
            pass

        assert controller_path(BookAuthorsController) == "/book_authors"

    def test_controller_path_without_suffix(self):
        class Greetings(AppController):
            pass

        assert controller_path(Greetings) == "/greetings"

    def test_controller_path_prefix_override(self):
        class AdminUsersController(AppController):
            prefix = "/admin/users/"

        assert controller_path(AdminUsersController) == "/admin/users"

    @pytest.mark.parametrize("name,expected", [
        ("newForm", "new_form"),
        ("editForm", "edit_form"),
        ("new_form", "new_form"),
        ("Index", "Index"),
        ("NewForm", "NewForm"),
    ])
    def test_canonical_action(self, name, expected):
        assert canonical_action(name) == expected

    @pytest.mark.parametrize("name,expected", [
        ("new_form", ("new_form", "newForm")),
        ("editForm", ("editForm", "edit_form")),
        ("index", ("index",)),
        ("SHOW", ("SHOW",)),
    ])
    def test_action_spellings(self, name, expected):
        assert action_spellings(name) == expected


# ============================================================================
# Extraction
# ============================================================================

class BaseController(AppController):
    def index(self):
        pass

    @POST
    def create(self):
        pass


class NotesController(BaseController):
    @PUT
    def index(self):
        pass

    async def search(self):
        pass

    @staticmethod
    def helper():
        pass

    @classmethod
    def build(cls):
        pass

    @property
    def title(self):
        return "notes"

    def _private(self):
        pass

    def get_layout(self):
        return "/layouts/notes"


class TestExtraction:

    def test_actions_discovered(self):
        metadata = extract_controller_metadata(NotesController)
        assert sorted(metadata.actions) == ["create", "index", "search"]

    def test_subclass_override_wins(self):
        metadata = extract_controller_metadata(NotesController)
        assert metadata.actions["index"].markers == (HttpMethod.PUT,)

    def test_inherited_action_keeps_markers(self):
        metadata = extract_controller_metadata(NotesController)
        assert metadata.actions["create"].markers == (HttpMethod.POST,)

    def test_async_flag(self):
        metadata = extract_controller_metadata(NotesController)
        assert metadata.actions["search"].is_async is True
        assert metadata.actions["create"].is_async is False

    def test_controller_attributes(self):
        metadata = extract_controller_metadata(NotesController)
        assert metadata.class_name == "NotesController"
        assert metadata.module_path.endswith(":NotesController")
        assert metadata.path == "/notes"
        assert metadata.is_restful is False

    def test_get_action_accepts_form_aliases_on_restful_controllers(self):
        @RESTful
        class FormsController(AppController):
            def new_form(self):
                pass

            def editForm(self):
                pass

        metadata = extract_controller_metadata(FormsController)
        assert metadata.get_action("newForm") == ActionMetadata(name="new_form")
        assert metadata.get_action("edit_form") == ActionMetadata(name="editForm")
        assert metadata.get_action("NEW_FORM") is None
        assert metadata.get_action("Edit_Form") is None

    def test_get_action_is_exact_on_conventional_controllers(self):
        class FormsController(AppController):
            def new_form(self):
                pass

        metadata = extract_controller_metadata(FormsController)
        assert metadata.get_action("new_form") == ActionMetadata(name="new_form")
        assert metadata.get_action("newForm") is None

    def test_declared_spellings_exact_first(self):
        @RESTful
        class BothController(AppController):
            def new_form(self):
                pass

            def newForm(self):
                pass

        metadata = extract_controller_metadata(BothController)
        assert [a.name for a in metadata.declared_spellings("newForm")] == ["newForm", "new_form"]
        assert [a.name for a in metadata.declared_spellings("new_form")] == ["new_form", "newForm"]

    def test_rejects_non_controllers(self):
        class Plain:
            def index(self):
                pass

        with pytest.raises(TypeError):
            extract_controller_metadata(Plain)


class TestMetadataRegistry:

    def test_register_is_idempotent(self, registry):
        first = registry.register(NotesController)
        second = registry.register(NotesController)
        assert first is second
        assert len(registry) == 1
        assert NotesController in registry

    def test_get_registers_lazily(self, registry):
        assert NotesController not in registry
        registry.get(NotesController)
        assert NotesController in registry

    def test_get_action(self, registry):
        action = registry.get_action(NotesController, "search")
        assert action.name == "search"

    def test_get_action_missing(self, registry):
        with pytest.raises(ActionNotFoundFault):
            registry.get_action(NotesController, "helper")

    def test_find_action_missing_returns_none(self, registry):
        assert registry.find_action(NotesController, "archive") is None

    def test_iteration_and_clear(self, registry):
        registry.register(NotesController)
        registry.register(BaseController)
        assert {m.class_name for m in registry} == {"NotesController", "BaseController"}
        registry.clear()
        assert len(registry) == 0
