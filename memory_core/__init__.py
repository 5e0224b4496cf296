"""
Memory Match core Python package.

Pure game logic for the concentration card game, kept free of any
presentation concerns so both the Flask app and the terminal front end
drive the same engine.
Modules:
- board.py: Card, CardState, Board
- state.py: GameState, Phase
- deal.py: Fisher-Yates shuffle and board dealing
- moves.py: select / resolve transitions
- engine.py: MemoryGame controller and win notification
- pacing.py: generation-tagged delayed tasks
- assets.py, config.py, cli.py
"""
