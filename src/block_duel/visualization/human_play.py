from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

import pygame

from block_duel.game import Action, GameConfig, Match
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_DOWN: Action.DOWN,
    pygame.K_UP: Action.ROTATE,
    pygame.K_x: Action.ROTATE,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_c: Action.HOLD,
}


def run(seed: Optional[int] = None, cell_size: int = 24) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        config = GameConfig(random_seed=seed)
        match = Match(config)
        renderer = Renderer(cell_size=cell_size)

        screen = pygame.display.set_mode(renderer.window_size(config.width, config.height))
        pygame.display.set_caption("Block Duel")

        running = True
        while running:
            now = pygame.time.get_ticks()
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r and not match.running:
                        match.start(now)
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            match.apply_action(action, now)

            # Gravity, opponent think and control
            match.advance(now)

            renderer.draw(screen, match)
            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    p = argparse.ArgumentParser(description="Play against the heuristic opponent")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=24)
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(message)s")
    run(seed=args.seed, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
