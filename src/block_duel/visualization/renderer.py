from __future__ import annotations

from typing import Optional

import pygame

from block_duel.game import Match, Session, Side, hard_drop_offset, orientations, with_piece

from .palette import color_for_value

TEXT = (230, 230, 230)
ACCENT = {Side.PLAYER: (0, 210, 255), Side.OPPONENT: (255, 64, 129)}
FLASH = (255, 255, 255)


class Renderer:
    """Draws both boards with their next/hold/score panels."""

    def __init__(self, cell_size: int = 24, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_w = 5 * cell_size
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> tuple[int, int]:
        board_w = width * self.cell_size
        block_w = self.panel_w + self.margin + board_w
        return (self.margin * 3 + block_w * 2, self.margin * 3 + height * self.cell_size)

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        return self._font

    def _grid_surface(self, session: Session) -> pygame.Surface:
        state = with_piece(session)
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        ghost_cells = set()
        piece = session.current
        if piece is not None:
            ghost_cells = set(piece.cells(0, hard_drop_offset(piece, session.board)))
        for y in range(h):
            for x in range(w):
                v = int(state[y, x])
                rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
                if y in session.pending_clear:
                    pygame.draw.rect(surf, FLASH, rect)
                elif v != 0:
                    pygame.draw.rect(surf, color_for_value(v), rect)
                elif (x, y) in ghost_cells and piece is not None:
                    pygame.draw.rect(surf, color_for_value(int(piece.kind)), rect, 2)
                else:
                    pygame.draw.rect(surf, color_for_value(0), rect)
        return surf

    def _draw_preview(self, screen: pygame.Surface, kind, x0: int, y0: int, label: str) -> None:
        screen.blit(self.font.render(label, True, TEXT), (x0, y0))
        if kind is None:
            return
        shape = orientations(kind)[0]
        small = int(self.cell_size * 0.7)
        for py in range(shape.shape[0]):
            for px in range(shape.shape[1]):
                if shape[py, px]:
                    rect = pygame.Rect(x0 + px * small, y0 + 20 + py * small, small - 1, small - 1)
                    pygame.draw.rect(screen, color_for_value(int(kind)), rect)

    def _draw_side(self, screen: pygame.Surface, session: Session, side: Side, x0: int, title: str) -> None:
        y0 = self.margin * 2
        title_img = self.font.render(title, True, ACCENT[side])
        screen.blit(title_img, (x0, self.margin // 2))
        self._draw_preview(screen, session.next.kind, x0, y0, "NEXT")
        self._draw_preview(screen, session.hold, x0, y0 + 5 * self.cell_size, "HOLD")
        screen.blit(self.font.render("SCORE", True, TEXT), (x0, y0 + 10 * self.cell_size))
        screen.blit(self.font.render(str(session.score), True, TEXT), (x0, y0 + 10 * self.cell_size + 20))
        if session.effect is not None:
            screen.blit(self.font.render(session.effect.upper(), True, ACCENT[side]), (x0, y0 + 12 * self.cell_size))
        board_x = x0 + self.panel_w + self.margin
        screen.blit(self._grid_surface(session), (board_x, y0))

    def draw(self, screen: pygame.Surface, match: Match) -> None:
        screen.fill((10, 10, 14))
        if match.sessions:
            width = match.config.width * self.cell_size
            block_w = self.panel_w + self.margin + width
            self._draw_side(screen, match.snapshot(Side.PLAYER), Side.PLAYER, self.margin, "PLAYER 1")
            self._draw_side(screen, match.snapshot(Side.OPPONENT), Side.OPPONENT,
                            self.margin * 2 + block_w, "CPU CORE")
        if match.game_over or not match.sessions:
            if match.winner is not None:
                msg = f"{'PLAYER 1' if match.winner is Side.PLAYER else 'CPU CORE'} WINS - R to restart"
            else:
                msg = "Press R to start, ESC to quit"
            img = self.font.render(msg, True, (255, 100, 100))
            rect = img.get_rect(center=(screen.get_width() // 2, screen.get_height() - self.margin))
            screen.blit(img, rect)
        pygame.display.flip()
