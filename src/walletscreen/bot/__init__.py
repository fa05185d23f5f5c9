"""Telegram conversation layer: command routing, wizard and poll loop."""
