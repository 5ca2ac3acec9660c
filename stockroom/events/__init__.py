"""
Events package - change notifications for realtime refresh
"""

from flask import current_app

from .change_feed import ChangeFeed, ChangeEvent, Subscription, watch_pick_list, INSERT, UPDATE, DELETE

EXTENSION_KEY = 'stockroom.change_feed'


def init_change_feed(app):
    """Attach a ChangeFeed to the app, wired to Dapr when enabled"""
    publisher = None
    if app.config.get('CHANGE_FEED_PUBSUB_ENABLED'):
        from .publisher import ChangePublisher
        publisher = ChangePublisher(pubsub_name=app.config['CHANGE_FEED_PUBSUB_NAME'])
    feed = ChangeFeed(publisher=publisher)
    app.extensions[EXTENSION_KEY] = feed
    return feed


def get_change_feed():
    """Change feed of the current app"""
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    'ChangeFeed',
    'ChangeEvent',
    'Subscription',
    'watch_pick_list',
    'init_change_feed',
    'get_change_feed',
    'INSERT',
    'UPDATE',
    'DELETE'
]
