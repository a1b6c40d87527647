"""
Services Package

Contains the room engine services: scoring, dictionary access, the room
registry, timers, and the GameService that coordinates them. Import the
modules directly; the package itself stays import-light so the mode
engines can depend on scoring without pulling in the coordinator.
"""
