"""Configuration module for Disk-Cache."""
