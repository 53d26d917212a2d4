# -*- coding: utf-8 -*-
"""
ER Diagram Web Application - Flask Backend
"""
from flask import Flask, request, jsonify
from flask_cors import CORS

from jpa_to_er.core import extract_entity, extract_all, generate_mermaid, to_dot
from jpa_to_er.web_app.app_config import config

SUPPORTED_FORMATS = {
    'mermaid': generate_mermaid,
    'dot': to_dot,
}

app = Flask(__name__)
CORS(app)
app.config.from_object(config)


def _json_object():
    """The request body when it is a JSON object, else None"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _malformed_body():
    return jsonify({
        'error': 'Malformed request body.',
        'details': 'Request body must be a JSON object.'
    }), 400


def _string_map(value):
    """A JSON object whose keys and values are all strings, else None"""
    if not isinstance(value, dict):
        return None
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
        return None
    return value


@app.route('/api/health')
def api_health():
    return jsonify({'status': 'ok'})


@app.route('/api/parse_entity', methods=['POST'])
def api_parse_entity():
    """Extract a single entity from one Java source"""
    try:
        data = _json_object()
        if data is None:
            return _malformed_body()
        content = data.get('content')
        if not isinstance(content, str):
            return jsonify({'error': 'Request body must contain a "content" string.'}), 400

        corpus = None
        if data.get('corpus') is not None:
            corpus = _string_map(data['corpus'])
            if corpus is None:
                return jsonify({'error': '"corpus" must map unit names to source text.'}), 400

        entity = extract_entity(content, corpus, app.config['EXTRA_VALUE_TYPES'])
        if entity is None:
            return jsonify({'error': 'No @Entity class found in the provided source.'}), 400

        return jsonify({'entity': entity.to_dict()})

    except Exception as e:
        app.logger.error(f"An unexpected error occurred in api_parse_entity: {e}")
        return jsonify({'error': str(e)}), 500


@app.route('/api/generate', methods=['POST'])
def api_generate():
    """Parse a set of Java sources and render the ER diagram"""
    try:
        data = _json_object()
        if data is None:
            return _malformed_body()
        files = _string_map(data.get('files'))
        if not files:
            return jsonify({
                'error': 'No Java sources provided.',
                'details': 'Request body must contain a non-empty "files" object of name -> source text.'
            }), 400

        fmt = data.get('format') or app.config['DEFAULT_FORMAT']
        if not isinstance(fmt, str) or fmt not in SUPPORTED_FORMATS:
            return jsonify({
                'error': f'Unsupported format: {fmt}',
                'details': f"Supported formats: {', '.join(SUPPORTED_FORMATS)}"
            }), 400

        use_corpus = data.get('useCorpus', True)
        if not isinstance(use_corpus, bool):
            return jsonify({
                'error': 'Invalid useCorpus value.',
                'details': '"useCorpus" must be true or false.'
            }), 400

        results = extract_all(files, use_corpus, app.config['EXTRA_VALUE_TYPES'])
        entities = [entity for entity in results.values() if entity is not None]
        skipped = [name for name, entity in results.items() if entity is None]

        if not entities:
            return jsonify({
                'error': 'No @Entity classes found in the provided sources.',
                'details': f'{len(skipped)} source(s) checked',
                'skipped': skipped
            }), 400

        app.logger.info(f"Generated {fmt} diagram for {len(entities)} entities ({len(skipped)} skipped)")

        return jsonify({
            'diagram': SUPPORTED_FORMATS[fmt](entities),
            'format': fmt,
            'entities': [entity.to_dict() for entity in entities],
            'skipped': skipped
        })

    except Exception as e:
        app.logger.error(f"An unexpected error occurred in api_generate: {e}")
        return jsonify({'error': str(e)}), 500


if __name__ == '__main__':
    app.run(debug=config.DEBUG, host=config.HOST, port=config.PORT, use_reloader=False)
