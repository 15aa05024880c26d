"""
ExifReaderのプロパティベーステスト

Property 3: Exifタグ抽出の順序保持
Property 4: 解析失敗時のエラー通知
を検証します。ExifToolの実行は tests/fake_exiftool.py の代替関数に差し替えます。
"""

import subprocess
import tempfile
from pathlib import Path
from unittest.mock import patch
from hypothesis import given, strategies as st
from hypothesis import settings
import pytest

from jpeg_exif_csv.exif_reader import ExifReader
from jpeg_exif_csv.exceptions import ExifReadError
from jpeg_exif_csv.models import ExifRecord

from tests.fake_exiftool import (
    FAKE_EXIFTOOL_PATH, make_reader, patch_exiftool, write_corrupt_jpeg, write_fake_jpeg
)


# Exifタグ名のストラテジー（ExifToolのタグ名は英数字）
tag_name_strategy = st.text(
    alphabet='ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789',
    min_size=1,
    max_size=20
).filter(lambda x: x not in ExifReader._NON_TAG_KEYS)

# タグ値のストラテジー（サロゲート文字を除く任意の文字列）
tag_value_strategy = st.text(
    alphabet=st.characters(blacklist_categories=('Cs',)),
    min_size=0,
    max_size=40
)


@st.composite
def exif_tags_strategy(draw):
    """(タグ名, 値) の一覧を生成するストラテジー（タグ名は一意）"""
    return draw(st.lists(
        st.tuples(tag_name_strategy, tag_value_strategy),
        min_size=0,
        max_size=20,
        unique_by=lambda p: p[0]
    ))


class TestExifReaderProperties:
    """ExifReaderのプロパティテスト"""

    def setup_method(self):
        """各テストメソッドの前に実行される初期化"""
        self.exif_reader = make_reader()

    @settings(max_examples=100, deadline=None)
    @given(exif_tags_strategy())
    def test_exif_entries_preserve_parser_order_property(self, tags):
        """
        **Property 3: Exifタグ抽出の順序保持**

        任意のExifタグ一覧を持つファイルに対して、抽出結果はExifToolが報告した順序で
        すべてのタグを含み、タグ数と一致すべきである。
        """
        with tempfile.TemporaryDirectory() as temp_dir:
            file_path = write_fake_jpeg(Path(temp_dir) / 'photo.jpg', tags)

            with patch_exiftool():
                record = self.exif_reader.read_exif(file_path)

        assert isinstance(record, ExifRecord)
        assert record.path == file_path
        assert record.mime_type == 'image/jpeg'
        assert record.entries == [(tag, value) for tag, value in tags]
        assert record.tag_count == len(tags)

    @settings(max_examples=50, deadline=None)
    @given(st.binary(min_size=0, max_size=64))
    def test_unparseable_file_raises_property(self, content):
        """
        **Property 4: 解析失敗時のエラー通知**

        任意の解析できない内容のファイルに対して、ExifReadErrorが送出され、
        そのメッセージはファイルパスを含むべきである。
        """
        with tempfile.TemporaryDirectory() as temp_dir:
            file_path = Path(temp_dir) / 'broken.jpg'
            # JSONとして読めない内容にする
            file_path.write_bytes(b'\xff\xd8' + content)

            with patch_exiftool():
                with pytest.raises(ExifReadError) as exc_info:
                    self.exif_reader.read_exif(file_path)

        assert str(file_path) in str(exc_info.value)
        assert 'File format error' in str(exc_info.value)

    def test_jpeg_without_exif_has_zero_tags(self, tmp_path):
        """Exifタグのないファイルはタグ数0として読み取れることを確認"""
        file_path = write_fake_jpeg(tmp_path / 'a.jpg')

        with patch_exiftool():
            record = self.exif_reader.read_exif(file_path)

        assert record.entries == []
        assert record.to_row() == [str(file_path), 'image/jpeg', '0']

    def test_mime_type_passed_through(self, tmp_path):
        """MIMEタイプはExifToolの出力をそのまま使うことを確認（拡張子は再確認しない）"""
        file_path = write_fake_jpeg(tmp_path / 'really_a_png.jpg', mime_type='image/png')

        with patch_exiftool():
            record = self.exif_reader.read_exif(file_path)

        assert record.mime_type == 'image/png'

    def test_corrupt_file_raises(self, tmp_path):
        """破損ファイルでExifReadErrorが送出されることを確認"""
        file_path = write_corrupt_jpeg(tmp_path / 'corrupt.jpg')

        with patch_exiftool():
            with pytest.raises(ExifReadError, match='File format error'):
                self.exif_reader.read_exif(file_path)

    def test_missing_file_raises_with_exiftool_message(self, tmp_path):
        """存在しないファイルはExifToolのエラーメッセージ付きで失敗することを確認"""
        file_path = tmp_path / 'missing.jpg'

        with patch_exiftool():
            with pytest.raises(ExifReadError, match='File not found'):
                self.exif_reader.read_exif(file_path)

    def test_non_string_values_are_formatted(self, tmp_path):
        """数値やリストの値が文字列に変換されることを確認"""
        file_path = write_fake_jpeg(tmp_path / 'b.jpg', [
            ('ISO', 100),
            ('FNumber', 2.8),
            ('SubjectArea', [1, 2, 3]),
            ('Make', 'Canon'),
        ])

        with patch_exiftool():
            record = self.exif_reader.read_exif(file_path)

        assert record.entries == [
            ('ISO', '100'),
            ('FNumber', '2.8'),
            ('SubjectArea', '1, 2, 3'),
            ('Make', 'Canon'),
        ]

    def test_exiftool_command_line(self, tmp_path):
        """ExifToolがJSON出力・Exifタグ指定で1回だけ実行されることを確認"""
        file_path = write_fake_jpeg(tmp_path / 'c.jpg', [('Make', 'Canon')])

        with patch_exiftool() as mock_run:
            self.exif_reader.read_exif(file_path)

        assert mock_run.call_count == 1
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == str(FAKE_EXIFTOOL_PATH)
        assert '-j' in cmd
        assert '-EXIF:All' in cmd
        assert '-File:MIMEType' in cmd
        assert '-a' in cmd
        assert '-G1' in cmd
        assert cmd[-1] == str(file_path)

    def test_dash_prefixed_file_name_not_passed_as_option(self, tmp_path, monkeypatch):
        """"-" で始まるファイル名はオプションと誤解されないパスでExifToolに渡されることを確認"""
        monkeypatch.chdir(tmp_path)
        write_fake_jpeg(tmp_path / '-ver.jpg', [('Make', 'Canon')])
        relative_path = Path('-ver.jpg')

        with patch_exiftool() as mock_run:
            record = self.exif_reader.read_exif(relative_path)

        cmd = mock_run.call_args[0][0]
        assert not cmd[-1].startswith('-')
        assert Path(cmd[-1]) == Path.cwd() / '-ver.jpg'
        # CSVに出力するパスは変更しない
        assert record.path == relative_path
        assert record.to_row()[:3] == ['-ver.jpg', 'image/jpeg', '1']

    def test_duplicate_tags_across_groups_are_kept(self, tmp_path):
        """IFD0とIFD1の同名タグが両方とも出力順に保持されることを確認"""
        file_path = write_fake_jpeg(tmp_path / 'camera.jpg')
        stdout = (
            '[{"SourceFile": "camera.jpg", "File:MIMEType": "image/jpeg", '
            '"IFD0:Make": "Canon", "IFD0:XResolution": 72, "IFD0:YResolution": 72, '
            '"ExifIFD:ISO": 100, "IFD1:XResolution": 180, "IFD1:YResolution": 180}]'
        )
        completed = subprocess.CompletedProcess([], 0, stdout, '')

        with patch('jpeg_exif_csv.exif_reader.subprocess.run', return_value=completed):
            record = self.exif_reader.read_exif(file_path)

        assert record.entries == [
            ('Make', 'Canon'),
            ('XResolution', '72'),
            ('YResolution', '72'),
            ('ISO', '100'),
            ('XResolution', '180'),
            ('YResolution', '180'),
        ]
        assert record.to_row()[2] == '6'

    def test_duplicate_json_keys_are_kept(self, tmp_path):
        """JSON内で同じキーが重複しても上書きされずに両方保持されることを確認"""
        file_path = write_fake_jpeg(tmp_path / 'dup.jpg')
        stdout = ('[{"SourceFile": "dup.jpg", "File:MIMEType": "image/jpeg", '
                  '"IFD0:Software": "A", "IFD0:Software": "B"}]')
        completed = subprocess.CompletedProcess([], 0, stdout, '')

        with patch('jpeg_exif_csv.exif_reader.subprocess.run', return_value=completed):
            record = self.exif_reader.read_exif(file_path)

        assert record.entries == [('Software', 'A'), ('Software', 'B')]

    def test_grouped_error_key_raises(self, tmp_path):
        """グループ名付きの Error キーも解析失敗として扱われることを確認"""
        file_path = write_fake_jpeg(tmp_path / 'bad.jpg')
        stdout = '[{"SourceFile": "bad.jpg", "ExifTool:Error": "Unknown file type"}]'
        completed = subprocess.CompletedProcess([], 1, stdout, '')

        with patch('jpeg_exif_csv.exif_reader.subprocess.run', return_value=completed):
            with pytest.raises(ExifReadError, match='Unknown file type'):
                self.exif_reader.read_exif(file_path)

    def test_timeout_raises(self, tmp_path):
        """ExifToolのタイムアウトはExifReadErrorになることを確認"""
        file_path = write_fake_jpeg(tmp_path / 'slow.jpg')
        reader = ExifReader(exiftool_path=FAKE_EXIFTOOL_PATH, timeout=5)

        with patch('jpeg_exif_csv.exif_reader.subprocess.run',
                   side_effect=subprocess.TimeoutExpired(cmd='exiftool', timeout=5)):
            with pytest.raises(ExifReadError, match='タイムアウト'):
                reader.read_exif(file_path)

    def test_invalid_json_output_raises(self, tmp_path):
        """ExifToolの出力がJSONでない場合はExifReadErrorになることを確認"""
        file_path = write_fake_jpeg(tmp_path / 'd.jpg')
        completed = subprocess.CompletedProcess([], 0, 'not json', '')

        with patch('jpeg_exif_csv.exif_reader.subprocess.run', return_value=completed):
            with pytest.raises(ExifReadError, match='JSON'):
                self.exif_reader.read_exif(file_path)

    def test_missing_mime_type_raises(self, tmp_path):
        """MIMEタイプが出力されない場合はExifReadErrorになることを確認"""
        file_path = write_fake_jpeg(tmp_path / 'e.jpg')
        completed = subprocess.CompletedProcess(
            [], 0, '[{"SourceFile": "e.jpg", "Make": "Canon"}]', '')

        with patch('jpeg_exif_csv.exif_reader.subprocess.run', return_value=completed):
            with pytest.raises(ExifReadError, match='MIME'):
                self.exif_reader.read_exif(file_path)

    def test_exiftool_not_found(self):
        """ExifToolが見つからない場合は初期化時にExifReadErrorになることを確認"""
        with patch.object(ExifReader, '_find_exiftool',
                          side_effect=FileNotFoundError("ExifTool が見つかりません")):
            with pytest.raises(ExifReadError, match='ExifTool'):
                ExifReader()

    def test_exiftool_detected_on_init(self):
        """ExifToolの自動検索とバージョン確認が行われることを確認"""
        with patch.object(ExifReader, '_find_exiftool', return_value=FAKE_EXIFTOOL_PATH):
            with patch_exiftool() as mock_run:
                reader = ExifReader()

        assert reader.exiftool_path == FAKE_EXIFTOOL_PATH
        assert mock_run.call_args[0][0] == [str(FAKE_EXIFTOOL_PATH), '-ver']
