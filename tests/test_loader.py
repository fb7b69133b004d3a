"""End-to-end tests for loading TMX maps from files and streams."""

import io
import logging

import pytest

from conftest import layer_xml, map_xml, pack_gids
from tmx_loader import LoaderConfig, TmxLoader, load_map, load_map_from_stream
from tmx_loader.__main__ import main
from tmx_loader.diagnostics import DiagnosticKind


class TestScenarios:
    """Concrete documents and the maps they should produce."""

    def test_csv_layer(self, write_tmx):
        path = write_tmx(map_xml(layer_xml("ground", 2, 2, "1,2,3,4")))
        tiled_map = load_map(path)
        assert (tiled_map.width, tiled_map.height) == (2, 2)
        assert (tiled_map.tilewidth, tiled_map.tileheight) == (32, 32)
        assert tiled_map.layers[0].name == "ground"
        assert tiled_map.layers[0].tolist() == [[1, 2], [3, 4]]

    def test_base64_layer(self, write_tmx):
        path = write_tmx(map_xml(layer_xml("ground", 2, 2, pack_gids([1, 2, 3, 4]), encoding="base64")))
        assert load_map(path).layers[0].tolist() == [[1, 2], [3, 4]]

    def test_only_layer_unsupported(self, write_tmx):
        path = write_tmx(map_xml(layer_xml("ground", 2, 2, "AAAA", encoding="rle")))
        tiled_map = load_map(path)
        assert tiled_map is not None
        assert tiled_map.layers == ()

    def test_object_without_size(self, write_tmx):
        path = write_tmx(map_xml('<objectgroup><object id="1" x="10.5" y="20.0"/></objectgroup>'))
        obj = load_map(path).objects[0]
        assert (obj.x, obj.y, obj.width, obj.height) == (10.5, 20.0, 0, 0)

    def test_short_csv_fails_whole_load(self, write_tmx):
        path = write_tmx(map_xml(
            layer_xml("fine", 2, 2, "1,1,1,1"),
            layer_xml("ground", 2, 2, "1,2,3"),
        ))
        assert load_map(path) is None


class TestFullDocument:
    def test_sample_map(self, write_tmx, sample_tmx):
        tiled_map = load_map(write_tmx(sample_tmx))

        assert [ts.firstgid for ts in tiled_map.tilesets] == [1, 65]
        assert [layer.name for layer in tiled_map.layers] == ["ground", "decor"]
        for layer in tiled_map.layers:
            assert layer.tiles.shape == (layer.height, layer.width)

        decor = tiled_map.get_layer_by_name("decor")
        assert decor.get_tile_gid(1, 0) == 65
        assert tiled_map.get_tileset_for_gid(decor.get_tile_gid(0, 1)).source == "props.tsx"

        door = tiled_map.get_objects_by_type("trigger")[0]
        assert door.properties["target"] == "cellar"
        assert door.properties["locked"] == "true"
        assert (door.width, door.height) == (32.0, 64.0)

    def test_layer_count_matches_document(self, write_tmx):
        layers = [layer_xml(f"layer{i}", 3, 2, ",".join(["7"] * 6)) for i in range(5)]
        tiled_map = load_map(write_tmx(map_xml(*layers, width=3, height=2)))
        assert len(tiled_map.layers) == 5
        assert all(layer.tolist() == [[7, 7, 7], [7, 7, 7]] for layer in tiled_map.layers)

    def test_mixed_encodings_agree(self, write_tmx):
        gids = [3, 0, 9, 12, 1, 1]
        csv_payload = ",".join(map(str, gids))
        tiled_map = load_map(write_tmx(map_xml(
            layer_xml("csv", 3, 2, csv_payload),
            layer_xml("b64", 3, 2, pack_gids(gids), encoding="base64"),
            layer_xml("zlib", 3, 2, pack_gids(gids, "zlib"), encoding="base64", compression="zlib"),
            width=3, height=2,
        )))
        grids = [layer.tolist() for layer in tiled_map.layers]
        assert grids[0] == grids[1] == grids[2] == [[3, 0, 9], [12, 1, 1]]


class TestLoadFailures:
    """Anything fatal yields None, never an exception."""

    def test_missing_file(self, tmp_path):
        assert load_map(tmp_path / "nope.tmx") is None

    def test_malformed_xml(self, write_tmx):
        assert load_map(write_tmx("<map width='2'><layer>")) is None

    def test_missing_map_attribute(self, write_tmx):
        assert load_map(write_tmx('<map width="2" height="2" tilewidth="32"/>')) is None

    def test_wrong_root_element(self, write_tmx):
        assert load_map(write_tmx('<tileset firstgid="1"/>')) is None

    def test_missing_firstgid(self, write_tmx):
        path = write_tmx(map_xml('<tileset source="a.tsx"/>', layer_xml("g", 2, 2, "1,2,3,4")))
        assert load_map(path) is None

    def test_short_base64(self, write_tmx):
        path = write_tmx(map_xml(layer_xml("g", 2, 2, pack_gids([1, 2, 3]), encoding="base64")))
        assert load_map(path) is None

    def test_failure_is_logged_with_input(self, write_tmx, caplog):
        path = write_tmx(map_xml(layer_xml("g", 2, 2, "1,2,3")))
        with caplog.at_level(logging.ERROR, logger="tmx_loader"):
            assert load_map(path) is None
        assert str(path) in caplog.text

    def test_document_size_limit(self, write_tmx, sample_tmx):
        path = write_tmx(sample_tmx)
        assert TmxLoader(LoaderConfig(max_document_bytes=64)).load_from_tmx(path) is None
        assert TmxLoader(LoaderConfig(max_document_bytes=1 << 20)).load_from_tmx(path) is not None

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            LoaderConfig(max_document_bytes=0)


class TestStreams:
    def test_binary_stream(self, sample_tmx):
        tiled_map = load_map_from_stream(io.BytesIO(sample_tmx.encode("utf-8")))
        assert len(tiled_map.layers) == 2

    def test_text_stream(self, sample_tmx):
        assert load_map_from_stream(io.StringIO(sample_tmx)) is not None

    def test_bounded_stream(self, sample_tmx):
        loader = TmxLoader(LoaderConfig(max_document_bytes=1 << 20))
        assert loader.load_from_stream(io.BytesIO(sample_tmx.encode("utf-8"))) is not None

    def test_text_stream_limit_counts_encoded_bytes(self):
        # 40 characters, 80 bytes in UTF-8
        content = map_xml('<objectgroup name="' + "\u00e9" * 40 + '"/>')
        chars = len(content)
        loader = TmxLoader(LoaderConfig(max_document_bytes=chars + 10))
        assert loader.load_from_stream(io.StringIO(content)) is None
        roomy = TmxLoader(LoaderConfig(max_document_bytes=chars + 40))
        assert roomy.load_from_stream(io.StringIO(content)) is not None

    def test_broken_stream(self):
        assert load_map_from_stream(io.BytesIO(b"\x00\x01 not xml")) is None


class TestDiagnosticSink:
    def test_events_for_successful_load(self, write_tmx, sample_tmx):
        recorded = []
        loader = TmxLoader(sink=lambda kind, message: recorded.append(kind))
        loader.load_from_tmx(write_tmx(sample_tmx))
        assert recorded.count(DiagnosticKind.TILESET_LOADED) == 2
        assert recorded.count(DiagnosticKind.LAYER_LOADED) == 2
        assert recorded.count(DiagnosticKind.OBJECT_GROUP_LOADED) == 1
        assert DiagnosticKind.LOAD_FAILED not in recorded

    def test_unsupported_encoding_and_failure(self, write_tmx):
        messages = []
        loader = TmxLoader(sink=lambda kind, message: messages.append((kind, message)))
        loader.load_from_tmx(write_tmx(map_xml(
            layer_xml("odd", 2, 2, "", encoding="rle"),
            layer_xml("bad", 2, 2, "1"),
        )))
        kinds = [kind for kind, _ in messages]
        assert kinds == [DiagnosticKind.UNSUPPORTED_ENCODING, DiagnosticKind.LOAD_FAILED]
        assert "'rle'" in messages[0][1]

    def test_raising_sink_does_not_escape(self, write_tmx, sample_tmx, caplog):
        def broken_sink(kind, message):
            raise RuntimeError("sink broke")

        loader = TmxLoader(sink=broken_sink)
        with caplog.at_level(logging.ERROR, logger="tmx_loader"):
            assert loader.load_from_tmx(write_tmx(sample_tmx)) is not None
            assert loader.load_from_tmx(write_tmx("<map>", name="bad.tmx")) is None
        assert "Diagnostic sink failed" in caplog.text


class TestCommandLine:
    def test_summary(self, write_tmx, sample_tmx, capsys):
        assert main([str(write_tmx(sample_tmx))]) == 0
        out = capsys.readouterr().out
        assert "Map: 2x2 tiles (32x32 px)" in out
        assert "decor 2x2, 2 tiles used" in out
        assert "Objects: 2" in out

    def test_failure_exit_code(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.tmx")]) == 1
        assert "could not load" in capsys.readouterr().err
