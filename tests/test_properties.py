import tempfile
from pathlib import Path
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from cfgonce.constants import LOCAL_DIR_ENV
from cfgonce.files import ResolutionStatus
from cfgonce.formats import DEFAULT_REGISTRY, FileFormat
from cfgonce.path import ConfigOption, ConfigPathMetadata, search
from cfgonce.project import ProjectPath

PROJECT = ProjectPath("org", "cfgonce", "cfgonce-test")

# Printable ASCII keeps every codec on its lossless path.
text = st.text(alphabet=st.characters(min_codepoint=32, max_codepoint=126), max_size=12)
scalars = (
    st.booleans()
    | st.integers(min_value=-(2**63), max_value=2**63 - 1)
    | st.floats(allow_nan=False, allow_infinity=False)
    | text
)
keys = st.text(
    alphabet=st.characters(min_codepoint=97, max_codepoint=122), min_size=1, max_size=8
)
values = st.recursive(
    scalars,
    lambda children: st.lists(children, max_size=3)
    | st.dictionaries(keys, children, max_size=3),
    max_leaves=10,
)
documents = st.dictionaries(keys, values, max_size=5)
names = st.lists(keys, min_size=1, max_size=3, unique=True)


@given(document=documents, file_format=st.sampled_from(DEFAULT_REGISTRY.formats))
def test_codec_round_trip(document: dict[str, Any], file_format: FileFormat) -> None:
    """
    Property: Decoding what a codec encoded yields the original document,
    for every registered format.
    """
    encoded = DEFAULT_REGISTRY.serialize(file_format, document)
    assert DEFAULT_REGISTRY.deserialize(file_format, encoded) == document


@given(
    config_names=names,
    pick=st.integers(min_value=0),
    default_format=st.sampled_from(DEFAULT_REGISTRY.formats),
    sys_override_local=st.booleans(),
    hidden=st.booleans(),
)
def test_priority_side_wins(
    config_names: list[str],
    pick: int,
    default_format: FileFormat,
    sys_override_local: bool,
    hidden: bool,
) -> None:
    """
    Property: When the same file exists locally and in the system directory,
    the side with priority is always chosen, and a dot-prefixed twin in that
    directory always beats the plain file.
    """
    name = config_names[pick % len(config_names)]
    filename = f"{name}.{default_format.extension}"

    with tempfile.TemporaryDirectory() as tmp, pytest.MonkeyPatch.context() as mp:
        local = Path(tmp) / "local"
        system = Path(tmp) / "system"
        for directory in (local, system):
            directory.mkdir()
            (directory / filename).write_text("")
            if hidden:
                (directory / f".{filename}").write_text("")

        mp.setenv(LOCAL_DIR_ENV, str(local))
        mp.setattr("cfgonce.path.system_dir", lambda *_: system)

        metadata = ConfigPathMetadata(
            project_path=PROJECT,
            config_name=config_names,
            default_format=default_format,
            config_option=ConfigOption(sys_override_local=sys_override_local),
        )
        state = search(metadata)

    expected_dir = system if sys_override_local else local
    expected_name = f".{filename}" if hidden else filename
    assert state.status is ResolutionStatus.FOUND
    assert state.file_format is default_format
    assert state.path == expected_dir / expected_name
