from flask import Flask
import logging
import os
import sys

import context

from services.disasters import create_disasters_blueprint


# Initialize application.
app = Flask("disaster_response")

app.debug = os.environ.get('DEBUG', "False").lower() in ["true", "1", "yes"]

if app.debug:
    print("Sending all debug messages to the console")
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    logging.getLogger('kafka').setLevel(logging.INFO)
    logging.getLogger('engineio').setLevel(logging.WARN)
    logging.getLogger('socketio').setLevel(logging.WARN)
    logging.getLogger('urllib3').setLevel(logging.INFO)
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(logging.DEBUG)
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    ch.setFormatter(formatter)
    root.addHandler(ch)

logger = logging.getLogger(__name__)


@app.after_request
def add_cors_headers(resp):
    resp.headers['Access-Control-Allow-Origin'] = context.CORS_ORIGINS
    resp.headers['Access-Control-Allow-Headers'] = 'Content-Type'
    resp.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
    return resp


# Register routes.
app.register_blueprint(create_disasters_blueprint(
    context.disasters, context.resources, context.aggregator, context.bus,
    context.geocoder, context.social_feed, context.official_updates, context.image_verifier,
    ttl=context.CACHE_TTL_SECONDS, radius_meters=context.RESOURCE_RADIUS_METERS), url_prefix="/api")

context.init_app(app)

@context.socketio.on('connect')
def on_connect(auth=None):
    logger.info("Client connected to the socket")

logger.info("Server initialization complete")

if __name__ == '__main__':
    context.socketio.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 5001)))
