"""Unit tests for FileServerClient."""

import json

import httpx
import pytest

from cli.api_client import FileServerClient


STORED = {
    'name': '1718000000000-abc123def4567-test.txt',
    'originalName': 'test.txt',
    'size': 26,
    'sizeFormatted': '26 Bytes',
    'uploadDate': '2024-06-10T06:13:20Z',
    'type': 'document',
    'url': 'http://test/uploads/1718000000000-abc123def4567-test.txt',
    'extension': '.txt',
    'icon': 'far fa-file-alt text-blue-400',
}


@pytest.fixture
def mock_transport_success():
    """Mock transport that returns successful responses."""
    def handler(request):
        path = request.url.path
        if path == '/api/health':
            return httpx.Response(200, json={
                'success': True, 'message': 'File server running',
                'timestamp': '2024-06-10T06:13:20+00:00', 'version': '1.0.0',
                'features': 'All file types allowed'
            })
        elif path == '/api/info':
            return httpx.Response(200, json={'success': True, 'data': {
                'totalFiles': 3, 'totalSize': 2048, 'totalSizeFormatted': '2 KB',
                'uploadPath': 'uploads', 'maxFileSize': 524288000,
                'maxFileSizeFormatted': '500 MB', 'maxFilesPerRequest': 50,
                'allowedFileTypes': 'All file types allowed',
                'filesByType': {'image': 2, 'video': 0, 'document': 1},
            }})
        elif path == '/api/upload' and request.method == 'POST':
            return httpx.Response(200, json={'success': True, 'message': 'ok', 'data': {
                'files': [STORED], 'totalSize': 26, 'totalSizeFormatted': '26 Bytes'
            }})
        elif path == '/api/files' and request.method == 'GET':
            return httpx.Response(200, json={'success': True, 'data': {
                'files': [STORED],
                'pagination': {
                    'current': 1, 'limit': 1, 'totalPages': 2, 'totalFiles': 2,
                    'hasNext': True, 'hasPrev': False
                }
            }})
        elif path == '/api/files/batch' and request.method == 'DELETE':
            names = json.loads(request.content)['filenames']
            return httpx.Response(200, json={'success': True, 'message': 'done', 'data': {
                'success': names[:1],
                'failed': [
                    {'filename': n, 'error': f'File not found: {n}', 'code': 'FILE_NOT_FOUND'}
                    for n in names[1:]
                ],
                'deletedCount': 1,
                'failedCount': len(names) - 1,
            }})
        elif path.startswith('/api/files/') and path.endswith('/download'):
            return httpx.Response(200, content=b'downloaded bytes')
        elif path.startswith('/api/files/') and request.method == 'DELETE':
            name = path.rsplit('/', 1)[1]
            return httpx.Response(200, json={
                'success': True, 'message': 'File deleted successfully',
                'data': {'filename': name}
            })

        return httpx.Response(404, json={'success': False, 'error': 'Not Found', 'code': 'NOT_FOUND'})

    return httpx.MockTransport(handler)


@pytest.fixture
def client_with_mock(temp_config, mock_transport_success):
    """Create FileServerClient with mocked HTTP transport."""
    client = FileServerClient(temp_config)
    client.session = httpx.Client(transport=mock_transport_success, base_url='http://test')
    return client


def make_client(temp_config, handler):
    client = FileServerClient(temp_config)
    client.session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')
    return client


def test_health(client_with_mock):
    assert client_with_mock.health().startswith('Server OK (version 1.0.0')


def test_info(client_with_mock):
    result = client_with_mock.info()

    assert 'Files: 3 (2 KB)' in result
    assert 'max 50 files per upload' in result
    assert 'image=2' in result
    assert 'video' not in result


def test_upload_files_success(client_with_mock, sample_file):
    """Test successful file upload."""
    result = client_with_mock.upload_files([str(sample_file)])

    assert 'Uploaded: test.txt -> 1718000000000-abc123def4567-test.txt' in result
    assert 'Total: 1 file(s), 26 Bytes' in result


def test_upload_sends_every_file_in_one_request(temp_config, multiple_sample_files):
    received = []

    def handler(request):
        received.append(request)
        return httpx.Response(200, json={'success': True, 'message': 'ok', 'data': {
            'files': [], 'totalSize': 0, 'totalSizeFormatted': '0 Bytes'
        }})

    client = make_client(temp_config, handler)
    client.upload_files([str(p) for p in multiple_sample_files])

    assert len(received) == 1
    body = received[0].read()
    assert body.count(b'name="files"') == 3
    assert b'filename="test2.txt"' in body


def test_upload_missing_local_file(client_with_mock, tmp_path):
    result = client_with_mock.upload_files([str(tmp_path / 'nope.txt')])
    assert result.startswith('Error: File not found')


def test_upload_too_many_files_rejected_locally(client_with_mock, sample_file):
    result = client_with_mock.upload_files([str(sample_file)] * 51)
    assert 'Too many files' in result


def test_upload_limit_error_passes_server_message(temp_config, sample_file):
    def handler(request):
        return httpx.Response(400, json={
            'success': False, 'error': 'File too large: test.txt. Limit: 10 Bytes',
            'code': 'LIMIT_EXCEEDED'
        })

    client = make_client(temp_config, handler)
    result = client.upload_files([str(sample_file)])

    assert result == 'Upload failed: File too large: test.txt. Limit: 10 Bytes'


def test_list_files(client_with_mock):
    result = client_with_mock.list_files('document', page=1, limit=1)

    assert 'Page 1/2 (2 file(s)):' in result
    assert 'test.txt [document]' in result
    assert 'More files: list --page 2' in result


def test_list_files_sends_query(temp_config):
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json={'success': True, 'data': {
            'files': [],
            'pagination': {
                'current': 1, 'limit': 5, 'totalPages': 0, 'totalFiles': 0,
                'hasNext': False, 'hasPrev': False
            }
        }})

    client = make_client(temp_config, handler)
    result = client.list_files('video', page=3, limit=5)

    assert seen == {'type': 'video', 'page': '3', 'limit': '5'}
    assert result == 'No files found of type video.'


def test_delete_file(client_with_mock):
    assert client_with_mock.delete_file('a.txt') == 'Deleted: a.txt'


def test_delete_file_not_found(temp_config):
    def handler(request):
        return httpx.Response(404, json={
            'success': False, 'error': 'File not found: a.txt', 'code': 'FILE_NOT_FOUND'
        })

    client = make_client(temp_config, handler)
    assert client.delete_file('a.txt') == 'Error: File not found: a.txt'


def test_delete_files_batch(client_with_mock):
    result = client_with_mock.delete_files(['a.txt', 'b.txt'])

    assert 'Deleted: a.txt' in result
    assert 'Failed: b.txt (File not found: b.txt)' in result
    assert '1 deleted, 1 failed' in result


def test_download(client_with_mock, tmp_path):
    result = client_with_mock.download('1-a-x.bin', str(tmp_path))

    assert (tmp_path / 'x.bin').read_bytes() == b'downloaded bytes'
    assert not (tmp_path / '1-a-x.bin').exists()
    assert 'Downloaded: 1-a-x.bin' in result


def test_download_defaults_to_current_directory(client_with_mock, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    client_with_mock.download('1718000000000-abc123-report.pdf')

    assert (tmp_path / 'report.pdf').read_bytes() == b'downloaded bytes'


def test_download_to_explicit_file(client_with_mock, tmp_path):
    target = tmp_path / 'saved' / 'copy.bin'

    result = client_with_mock.download('1-a-x.bin', str(target))

    assert target.read_bytes() == b'downloaded bytes'
    assert str(target) in result



def test_server_error_is_retried(temp_config, monkeypatch):
    monkeypatch.setattr('cli.api_client.time.sleep', lambda seconds: None)
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(500, json={
                'success': False, 'error': 'boom', 'code': 'INTERNAL_ERROR'
            })
        return httpx.Response(200, json={
            'success': True, 'message': 'File server running',
            'timestamp': 'now', 'version': '1.0.0', 'features': 'All file types allowed'
        })

    client = make_client(temp_config, handler)

    assert client.health().startswith('Server OK')
    assert len(calls) == 3


def test_connection_error(temp_config, monkeypatch):
    monkeypatch.setattr('cli.api_client.time.sleep', lambda seconds: None)

    def handler(request):
        raise httpx.ConnectError('refused', request=request)

    client = make_client(temp_config, handler)

    assert client.health() == 'Error: Cannot connect to file server. Is it running?'


def test_request_id_header_sent(temp_config):
    headers = {}

    def handler(request):
        headers.update(request.headers)
        return httpx.Response(200, json={
            'success': True, 'message': 'ok', 'timestamp': 'now',
            'version': '1.0.0', 'features': 'x'
        })

    client = make_client(temp_config, handler)
    client.health()

    assert headers['x-request-id'] == client.request_id
