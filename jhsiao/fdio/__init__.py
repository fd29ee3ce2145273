"""Buffered, timeout-aware reading from raw file descriptors.

reader: Reader class and new() for reading counts, lines or everything.
rawio: single-syscall non-blocking reads with one wait-then-retry.
polling: wait for a fd to become readable.
errnos: errno constants and OSError construction.
"""
