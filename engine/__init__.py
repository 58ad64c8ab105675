"""
Chess AI engine package.

This package implements a Monte-Carlo capture-hunting chess engine: it plays
random games forward from the current position, scores each simulated line
by the pieces its moves capture (discounting later captures), and plays the
first move of the best line.

Modules:
    constants: Capture rewards, search defaults, engine identity
    rules:     python-chess adapter: legal moves, move application
    selector:  Seedable uniform random choice
    evaluate:  Capture rewards and discounted line scoring
    search:    Branching and sampling Monte-Carlo searches
    agents:    Random and search agents behind a common play() interface
"""
