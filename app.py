#!/usr/bin/env python3
"""
Flask Web Application for Stylus Trace Studio
Provides REST API endpoints for profiling uploaded transaction traces.
"""

from flask import Flask, request, jsonify, Response
from werkzeug.utils import secure_filename
import os
import tempfile
from stylus_trace import TraceProfiler, ProfileConfig, SCHEMA_VERSION, __version__
from stylus_trace.core.errors import (
    EmptyStacks,
    ParseError,
    RendererNotFound,
    StylusTraceError,
)
from stylus_trace.flamegraph import FlamegraphConfig, generate_flamegraph, parse_palette
from stylus_trace.formatters import stacks_to_collapsed_format
from stylus_trace.web import prepare_results

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 500 * 1024 * 1024
app.config['UPLOAD_FOLDER'] = tempfile.gettempdir()

ALLOWED_EXTENSIONS = {'json'}

def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def error_status(error):
    """HTTP status for a profiling error."""
    if isinstance(error, ParseError):
        return 400
    if isinstance(error, EmptyStacks):
        return 422
    if isinstance(error, RendererNotFound):
        return 503
    return 500


def profile_upload():
    """
    Profile the trace uploaded in the 'file' form field.
    Optional form fields:
      - 'tx_hash': transaction hash recorded in the profile (default: file name)
      - 'top_paths': number of hot paths (default: 20)
      - 'merge_threshold': fold stacks lighter than this into "other" (default: 0)
    Returns: (ProfileResult, None) or (None, (json_response, status))
    """
    if 'file' not in request.files:
        return None, (jsonify({'error': 'No file provided'}), 400)

    file = request.files['file']

    if not file.filename:
        return None, (jsonify({'error': 'No file selected'}), 400)

    if not allowed_file(file.filename):
        return None, (jsonify({'error': 'Invalid file type. Only JSON files are allowed.'}), 400)

    try:
        config = ProfileConfig(
            top_paths=int(request.form.get('top_paths', 20)),
            merge_threshold=int(request.form.get('merge_threshold', 0))
        )
    except ValueError as e:
        return None, (jsonify({'error': f'Invalid option: {e}'}), 400)

    filename = secure_filename(file.filename)
    tx_hash = request.form.get('tx_hash') or filename.rsplit('.', 1)[0]
    filepath = os.path.join(app.config['UPLOAD_FOLDER'], filename)
    file.save(filepath)

    try:
        profiler = TraceProfiler(config)
        result = profiler.profile_trace_file(filepath, tx_hash)
    except StylusTraceError as e:
        return None, (jsonify({'error': str(e)}), error_status(e))
    finally:
        os.remove(filepath)

    return result, None


@app.route('/api/profile', methods=['POST'])
def profile_api():
    """
    API endpoint to profile a trace file.
    Accepts: multipart/form-data with 'file' and the optional fields of profile_upload()
    Returns: JSON with the profile and display-ready summaries
    """
    result, error = profile_upload()
    if error:
        return error
    return jsonify(prepare_results(result))


@app.route('/api/collapsed', methods=['POST'])
def collapsed_api():
    """
    API endpoint returning collapsed stacks, one "stack weight" line each.
    Accepts: same form fields as /api/profile
    """
    result, error = profile_upload()
    if error:
        return error
    return Response(stacks_to_collapsed_format(result.stacks) + '\n', mimetype='text/plain')


@app.route('/api/flamegraph', methods=['POST'])
def flamegraph_api():
    """
    API endpoint rendering a flamegraph SVG.
    Accepts: same form fields as /api/profile plus optional
      - 'title': flamegraph title
      - 'palette': hot, mem, io, java or consistent (default: hot)
      - 'width': image width in pixels (default: 1200)
    """
    result, error = profile_upload()
    if error:
        return error

    config = FlamegraphConfig().with_palette(parse_palette(request.form.get('palette', 'hot')))
    if request.form.get('title'):
        config = config.with_title(request.form['title'])
    try:
        width = int(request.form.get('width', 1200))
    except ValueError:
        return jsonify({'error': 'Invalid width'}), 400
    if width <= 0:
        return jsonify({'error': 'Width must be positive'}), 400
    config = config.with_width(width)

    try:
        svg = generate_flamegraph(result.stacks, config)
    except StylusTraceError as e:
        return jsonify({'error': str(e)}), error_status(e)

    return Response(svg, mimetype='image/svg+xml')


@app.route('/api/schema', methods=['GET'])
def schema_api():
    """Schema and package version information."""
    return jsonify({'schema_version': SCHEMA_VERSION, 'version': __version__})


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5001)
