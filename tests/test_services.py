from __future__ import annotations

import logging

import pytest

from initiative_configurator.domain import (
    DEFAULT_PASSWORD,
    DEFAULT_USERNAME,
    Configurator,
    FieldType,
)
from initiative_configurator.exceptions import (
    AuthenticationError,
    BaseFieldImmutableError,
    BaseFieldsAlreadyInitializedError,
    CategoryNotFoundError,
    DuplicateCategoryError,
    DuplicateFieldError,
    DuplicateUsernameError,
    FieldNotFoundError,
)
from initiative_configurator.service import BASE_FIELD_DEFINITIONS


# AuthService

def test_registration_and_login_scenario(auth):
    assert auth.is_first_ever_launch() is True
    pending = auth.create_pending_configurator()
    assert auth.is_first_ever_launch() is False
    assert pending.first_login is True
    assert (pending.username, pending.password) == (DEFAULT_USERNAME, DEFAULT_PASSWORD)

    auth.complete_registration(pending, "alice", "secret1")
    assert pending.first_login is False

    assert auth.authenticate("alice", "secret1") is pending
    with pytest.raises(AuthenticationError):
        auth.authenticate("alice", "wrong")


def test_default_credentials_are_exact(auth):
    assert auth.is_default_credentials(DEFAULT_USERNAME, DEFAULT_PASSWORD)
    assert not auth.is_default_credentials("ADMIN", DEFAULT_PASSWORD)
    assert not auth.is_default_credentials(DEFAULT_USERNAME, "adminya")


def test_create_pending_configurator_requires_first_launch(auth, state):
    auth.create_pending_configurator()
    with pytest.raises(RuntimeError):
        auth.create_pending_configurator()
    assert len(state.configurators) == 1


def test_complete_registration_rejects_taken_username(auth, state):
    state.configurators.append(Configurator("Bob", "pw", first_login=False))
    pending = Configurator(DEFAULT_USERNAME, DEFAULT_PASSWORD)
    state.configurators.append(pending)

    with pytest.raises(DuplicateUsernameError, match="bob"):
        auth.complete_registration(pending, "bob", "secret")

    assert pending.first_login is True
    assert pending.username == DEFAULT_USERNAME
    assert [c.username for c in state.configurators] == ["Bob", DEFAULT_USERNAME]


def test_complete_registration_may_keep_own_placeholder_name(auth):
    pending = auth.create_pending_configurator()
    auth.complete_registration(pending, "Admin", "new-secret")
    assert pending.username == "Admin"
    assert pending.first_login is False


def test_complete_registration_only_once(auth):
    pending = auth.create_pending_configurator()
    auth.complete_registration(pending, "alice", "secret1")
    with pytest.raises(RuntimeError):
        auth.complete_registration(pending, "mallory", "x")
    assert pending.username == "alice"


def test_is_username_taken_is_case_insensitive(auth, state):
    state.configurators.append(Configurator("Alice", "pw", first_login=False))
    assert auth.is_username_taken("alice")
    assert auth.is_username_taken(" ALICE ")
    assert not auth.is_username_taken("bob")


def test_authenticate_returns_first_match(auth, state):
    first = Configurator("alice", "pw", first_login=False)
    state.configurators.extend([first, Configurator("bob", "pw", first_login=False)])
    assert auth.authenticate("ALICE", "pw") is first


def test_failed_login_is_logged(auth, caplog):
    with caplog.at_level(logging.WARNING, logger="initiative_configurator"):
        with pytest.raises(AuthenticationError):
            auth.authenticate("ghost", "pw")
    assert "ghost" in caplog.text


# ConfigurationService

def test_init_base_fields_once(configuration, state):
    assert configuration.are_base_fields_initialised() is False
    configuration.init_base_fields()

    assert configuration.are_base_fields_initialised() is True
    base = configuration.get_base_fields()
    assert len(base) == 8
    assert [(f.name, f.type) for f in base] == list(BASE_FIELD_DEFINITIONS)
    assert all(f.mandatory for f in base)

    snapshot = list(state.base_fields)
    for _ in range(3):
        with pytest.raises(BaseFieldsAlreadyInitializedError):
            configuration.init_base_fields()
    assert state.base_fields == snapshot
    assert state.base_fields_locked is True


def test_base_field_definitions():
    assert BASE_FIELD_DEFINITIONS == (
        ("Title", FieldType.STRING),
        ("ParticipantCount", FieldType.INTEGER),
        ("RegistrationDeadline", FieldType.DATE),
        ("Location", FieldType.STRING),
        ("Date", FieldType.DATE),
        ("Time", FieldType.TIME),
        ("IndividualFee", FieldType.DECIMAL),
        ("FinalDate", FieldType.DATE),
    )


def test_initialised_base_fields_stay_mandatory(configuration):
    configuration.init_base_fields()
    for f in configuration.get_base_fields():
        with pytest.raises(BaseFieldImmutableError):
            f.set_mandatory(False)
    assert all(f.mandatory for f in configuration.get_base_fields())


def test_get_base_fields_is_a_copy(configuration, state):
    configuration.init_base_fields()
    view = configuration.get_base_fields()
    assert isinstance(view, tuple)
    assert len(state.base_fields) == 8


# FieldService: gemeinsame Felder

def test_duplicate_common_field_scenario(fields, state):
    fields.add_common_field("Note", FieldType.STRING, False)
    with pytest.raises(DuplicateFieldError):
        fields.add_common_field("note", FieldType.INTEGER, True)

    assert len(state.common_fields) == 1
    only = state.common_fields[0]
    assert (only.name, only.type, only.mandatory) == ("Note", FieldType.STRING, False)


def test_remove_common_field(fields, state):
    fields.add_common_field("Note", FieldType.STRING, False)
    fields.add_common_field("Contact", FieldType.STRING, True)

    fields.remove_common_field("NOTE")
    assert [f.name for f in state.common_fields] == ["Contact"]

    with pytest.raises(FieldNotFoundError):
        fields.remove_common_field("Note")
    assert [f.name for f in state.common_fields] == ["Contact"]


def test_set_common_field_mandatory(fields):
    fields.add_common_field("Note", FieldType.STRING, False)
    fields.set_common_field_mandatory("note", True)
    assert fields.get_common_field("Note").mandatory is True

    with pytest.raises(FieldNotFoundError):
        fields.set_common_field_mandatory("missing", True)


def test_common_field_lookup(fields):
    assert fields.common_field_exists("Note") is False
    fields.add_common_field("Note", FieldType.STRING, False)
    assert fields.common_field_exists(" note ") is True
    with pytest.raises(FieldNotFoundError):
        fields.get_common_field("Other")


def test_invalid_common_field_is_not_added(fields, state):
    with pytest.raises(ValueError):
        fields.add_common_field("   ", FieldType.STRING, False)
    assert state.common_fields == []


# FieldService: spezifische Felder

def test_add_specific_field_rejects_duplicates_within_category(fields, categories):
    sport = categories.add_category("Sport")
    fields.add_specific_field(sport, "Livello", FieldType.STRING, True)

    with pytest.raises(DuplicateFieldError, match="Sport"):
        fields.add_specific_field(sport, "LIVELLO", FieldType.INTEGER, False)

    assert len(sport.specific_fields) == 1
    assert sport.specific_fields[0].type is FieldType.STRING


def test_same_specific_name_allowed_in_different_categories(fields, categories):
    sport = categories.add_category("Sport")
    art = categories.add_category("Kunst")
    fields.add_specific_field(sport, "Level", FieldType.STRING, True)
    fields.add_specific_field(art, "Level", FieldType.INTEGER, False)
    assert sport.get_specific_field("Level").type is FieldType.STRING
    assert art.get_specific_field("Level").type is FieldType.INTEGER


def test_remove_and_toggle_specific_field(fields, categories):
    sport = categories.add_category("Sport")
    fields.add_specific_field(sport, "Livello", FieldType.STRING, True)

    fields.set_specific_field_mandatory(sport, "livello", False)
    assert sport.get_specific_field("Livello").mandatory is False

    fields.remove_specific_field(sport, "LIVELLO")
    assert sport.specific_fields == []

    with pytest.raises(FieldNotFoundError):
        fields.remove_specific_field(sport, "Livello")
    with pytest.raises(FieldNotFoundError):
        fields.set_specific_field_mandatory(sport, "Livello", True)


# CategoryService

def test_add_category_returns_empty_category(categories, state):
    sport = categories.add_category("  Sport ")
    assert sport.name == "Sport"
    assert sport.specific_fields == []
    assert state.categories == [sport]


def test_duplicate_category(categories, state):
    categories.add_category("Sport")
    with pytest.raises(DuplicateCategoryError):
        categories.add_category("SPORT")
    assert len(state.categories) == 1


def test_get_category(categories):
    sport = categories.add_category("Sport")
    assert categories.get_category("sport") is sport
    assert categories.category_exists("SPORT")
    with pytest.raises(CategoryNotFoundError):
        categories.get_category("Kunst")


def test_remove_category_takes_its_specific_fields(categories, fields, state):
    sport = categories.add_category("Sport")
    art = categories.add_category("Kunst")
    fields.add_specific_field(sport, "Livello", FieldType.STRING, True)
    fields.add_specific_field(art, "Technik", FieldType.STRING, False)

    categories.remove_category("sport")

    assert categories.category_exists("Sport") is False
    assert state.categories == [art]
    remaining = [f.name for c in state.categories for f in c.specific_fields]
    assert remaining == ["Technik"]


def test_remove_missing_category(categories, state):
    categories.add_category("Sport")
    with pytest.raises(CategoryNotFoundError):
        categories.remove_category("Kunst")
    assert len(state.categories) == 1


def test_services_share_one_state(state, auth, fields, categories):
    categories.add_category("Sport")
    fields.add_common_field("Note", FieldType.STRING, False)
    auth.create_pending_configurator()
    assert len(state.categories) == 1
    assert len(state.common_fields) == 1
    assert len(state.configurators) == 1
