"""
Egg Catcher
===========

Falling-object catching game: eggs, bad eggs, bombs and gold drop from the
top of the screen and the player moves a basket to catch the good ones.

The simulation lives in catch_core; all tunable parameters are in
game_config.yaml.
"""
