"""Tests for call-site extraction from stack traces."""

from traceback import FrameSummary

import pytest

from logdock import CallerInfo
from logdock._caller import (CALLER_FRAME_INDEX,
                             TRACE_HEADER,
                             clean_file_path,
                             clean_method_name,
                             extract_caller_info,
                             format_trace,
                             get_caller_info,
                             parse_frame,
                             select_frame,
                             strip_bundler_prefix,
                             strip_url_host,
                             to_project_relative)


class TestParseFrame:
    def test_named_frame(self):
        info = parse_frame('    at processPayment (src/payment.ts:123:12)')
        assert info == CallerInfo(method='processPayment',
                                  file='src/payment.ts',
                                  line_number=123)

    def test_bare_location_has_no_method(self):
        info = parse_frame('    at src/payment.ts:45:3')
        assert info.method is None
        assert info.file == 'src/payment.ts'
        assert info.line_number == 45
        assert info.as_dict() == {'file': 'src/payment.ts', 'line_number': 45}

    def test_url_hosted_location(self):
        info = parse_frame('at handler (http://localhost:3000/src/app.ts:10:1)')
        assert info.method == 'handler'
        assert info.file == 'src/app.ts'
        assert info.line_number == 10

    def test_bare_url_location(self):
        info = parse_frame('at https://example.com/static/src/main.js:7:19')
        assert info.method is None
        assert info.file == 'src/main.js'
        assert info.line_number == 7

    def test_bundler_location(self):
        info = parse_frame('at render (webpack-internal:///./src/app.tsx:5:2)')
        assert info.method == 'render'
        assert info.file == 'src/app.tsx'
        assert info.line_number == 5

    def test_no_project_root_keeps_file_name(self):
        info = parse_frame('at f (/usr/lib/node/helper.js:1:1)')
        assert info.file == 'helper.js'

    def test_qualified_method_name_is_shortened(self):
        info = parse_frame('at Object.processPayment (/srv/shop/src/payment.ts:3:9)')
        assert info.method == 'processPayment'
        assert info.file == 'src/payment.ts'

    def test_python_frame(self):
        line = '  File "/home/dev/shop/src/billing/payment.py", line 88, in charge'
        info = parse_frame(line)
        assert info == CallerInfo(method='charge',
                                  file='src/billing/payment.py',
                                  line_number=88)

    def test_python_module_frame(self):
        info = parse_frame('  File "/opt/service/app/main.py", line 3, in <module>')
        assert info.method == '<module>'
        assert info.file == 'app/main.py'

    def test_python_frame_without_line_number_is_unparsed(self):
        info = parse_frame('  File "/opt/service/app/main.py", line None, in <module>')
        assert info == CallerInfo()
        assert not info

    @pytest.mark.parametrize('line', ['Error', '', None, 'at nowhere', '    at foo (bar)'])
    def test_unparsable_frame_is_empty(self, line):
        info = parse_frame(line)
        assert info == CallerInfo()
        assert info.as_dict() == {}


class TestFilePathCleanup:
    def test_strip_url_host_only_touches_urls(self):
        assert strip_url_host('https://cdn.example.com/a/b.js') == 'a/b.js'
        assert strip_url_host('/a/b.js') == '/a/b.js'

    def test_strip_bundler_prefix_variants(self):
        assert strip_bundler_prefix('webpack-internal:///./src/a.ts') == 'src/a.ts'
        assert strip_bundler_prefix('webpack:///./src/a.ts') == 'src/a.ts'
        assert strip_bundler_prefix('webpack-internal:///src/a.ts') == 'src/a.ts'
        assert strip_bundler_prefix('/src/a.ts') == '/src/a.ts'

    def test_src_preferred_over_app(self):
        assert to_project_relative('/srv/app/src/main.py') == 'src/main.py'
        assert to_project_relative('/srv/src/app/main.py') == 'src/app/main.py'

    def test_leftmost_src_wins(self):
        assert to_project_relative('/a/src/b/src/c.py') == 'src/b/src/c.py'

    def test_app_root(self):
        assert to_project_relative('/Users/me/web/app/page.tsx') == 'app/page.tsx'

    def test_marker_must_be_a_whole_segment(self):
        assert to_project_relative('/home/me/mysrc/util.py') == 'util.py'

    def test_windows_path(self):
        assert clean_file_path('C:\\work\\shop\\src\\pay.py') == 'src/pay.py'
        assert clean_file_path('C:\\tools\\helper.py') == 'helper.py'

    def test_relative_path_without_marker(self):
        assert clean_file_path('helper.js') == 'helper.js'


class TestCleanMethodName:
    def test_dotless_name_unchanged(self):
        assert clean_method_name('processPayment') == 'processPayment'

    def test_last_segment(self):
        assert clean_method_name('a.b.Service.run') == 'run'


class TestSelectFrame:
    def test_primary_offset(self):
        lines = ['h', '1', '2', '3', 'caller', 'older']
        assert select_frame(lines) == 'caller'

    def test_falls_back_one_frame(self):
        lines = ['h', '1', '2', '3']
        assert select_frame(lines) == '3'

    def test_too_shallow(self):
        assert select_frame(['h', '1', '2']) is None
        assert select_frame([]) is None


class TestExtractCallerInfo:
    def test_full_v8_trace(self):
        trace = '\n'.join([
            'Error',
            '    at LogDockLogger.getCallerInfo (logger.ts:70:15)',
            '    at LogDockLogger.log (logger.ts:55:28)',
            '    at LogDockLogger.error (logger.ts:40:10)',
            '    at processPayment (/srv/shop/src/payment.ts:123:12)',
            '    at main (/srv/shop/src/index.ts:5:1)',
        ])
        assert extract_caller_info(trace) == CallerInfo(
            method='processPayment', file='src/payment.ts', line_number=123)

    def test_lone_error_line(self):
        assert extract_caller_info('Error') == CallerInfo()

    def test_empty_trace(self):
        assert extract_caller_info('') == CallerInfo()
        assert extract_caller_info(None) == CallerInfo()

    def test_format_trace_is_most_recent_first(self):
        frames = [
            FrameSummary('/srv/app/main.py', 1, '<module>', line=''),
            FrameSummary('/srv/app/jobs.py', 20, 'run', line=''),
        ]
        lines = format_trace(frames).splitlines()
        assert lines[0] == TRACE_HEADER
        assert 'jobs.py' in lines[1]
        assert 'main.py' in lines[2]


def _fake_log():
    return get_caller_info()


def _fake_info():
    return _fake_log()


def test_get_caller_info_finds_application_frame():
    expected_line = 0

    def handler():
        nonlocal expected_line
        from inspect import currentframe
        expected_line = currentframe().f_lineno + 1
        return _fake_info()

    info = handler()
    assert CALLER_FRAME_INDEX == 4
    assert info.method == 'handler'
    assert info.file.endswith('test_caller.py')
    assert info.line_number == expected_line


def test_get_caller_info_never_raises(monkeypatch):
    import logdock._caller as caller_mod

    def boom(*args, **kwargs):
        raise RuntimeError('no stack for you')

    monkeypatch.setattr(caller_mod, 'extract_stack', boom)
    assert get_caller_info(debug=True) == CallerInfo()
