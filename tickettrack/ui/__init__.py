"""CustomTkinter user interface.

``ticket_feed`` has no toolkit dependency; everything else in this
package imports ``customtkinter``.
"""
