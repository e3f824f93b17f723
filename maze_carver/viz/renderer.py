import pygame
from typing import Iterator, Optional
from maze_carver.core.grid import Grid


class Renderer:
    COLOR_BG = (10, 10, 10)
    COLOR_WALL = (200, 200, 200)
    COLOR_VISITED = (60, 100, 160)  # Blue tint for '·'
    COLOR_PATH = (255, 215, 0)      # Gold for arrows
    COLOR_GLYPH = (20, 20, 20)

    def __init__(self, grid: Grid, steps: Optional[Iterator[str]] = None, width=1280, height=720,
                 delay_ms: int = 0, record_path: Optional[str] = None):
        self.grid = grid
        self.steps = steps
        self.delay_ms = delay_ms
        self.screen_width = width
        self.screen_height = height

        # Camera
        self.cell_size = 20.0  # Pixels per cell
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.zoom_speed = 1.1

        from maze_carver.viz.recorder import VideoRecorder
        self.recorder = VideoRecorder(output_file=record_path)

        self.font = None
        self.glyph_font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.finished = steps is None

    def fit_to_screen(self):
        """Auto-adjust zoom and pan to fit the entire maze on screen with padding."""
        padding = 40
        zoom_x = (self.screen_width - padding * 2) / self.grid.columns
        zoom_y = (self.screen_height - padding * 2) / self.grid.rows
        self.cell_size = min(zoom_x, zoom_y)

        self.offset_x = (self.screen_width - self.grid.columns * self.cell_size) / 2
        self.offset_y = (self.screen_height - self.grid.rows * self.cell_size) / 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"Maze Carver - {self.grid.rows}x{self.grid.columns}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.fit_to_screen()
        self.glyph_font = pygame.font.SysFont("DejaVu Sans", max(8, int(self.cell_size * 0.7)))

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h

            elif event.type == pygame.MOUSEWHEEL:
                # Zoom towards the mouse, keeping the cell under it in place
                mx, my = pygame.mouse.get_pos()
                wx = (mx - self.offset_x) / self.cell_size
                wy = (my - self.offset_y) / self.cell_size

                factor = self.zoom_speed if event.y > 0 else 1 / self.zoom_speed
                self.cell_size = max(0.5, min(200.0, self.cell_size * factor))
                self.glyph_font = pygame.font.SysFont("DejaVu Sans", max(8, int(self.cell_size * 0.7)))

                self.offset_x = mx - wx * self.cell_size
                self.offset_y = my - wy * self.cell_size

            elif event.type == pygame.MOUSEMOTION:
                if event.buttons[0] or event.buttons[2]:
                    self.offset_x += event.rel[0]
                    self.offset_y += event.rel[1]

    def draw_maze(self):
        self.surface.fill(self.COLOR_BG)
        grid = self.grid
        size = int(self.cell_size) + 1
        draw_glyphs = self.cell_size >= 14.0

        for y in range(grid.rows):
            for x in range(grid.columns):
                px = int(x * self.cell_size + self.offset_x)
                py = int(y * self.cell_size + self.offset_y)
                if px + size < 0 or py + size < 0 or px > self.screen_width or py > self.screen_height:
                    continue

                fx, fy = grid.cell_unit((x, y))
                glyph = grid.get_overlay(fx, fy)
                if glyph:
                    color = self.COLOR_VISITED if glyph == Grid.DOT else self.COLOR_PATH
                    pygame.draw.rect(self.surface, color, (px, py, size, size))
                    if draw_glyphs and glyph != Grid.DOT:
                        label = self.glyph_font.render(glyph, True, self.COLOR_GLYPH)
                        self.surface.blit(label, label.get_rect(center=(px + size // 2, py + size // 2)))

                # Floor below and separator to the right, plus the outer top/left edges
                if grid.get_wall(fx, fy) != Grid.OPEN:
                    pygame.draw.line(self.surface, self.COLOR_WALL, (px, py + size), (px + size, py + size), 1)
                if grid.get_wall(fx + 1, fy) != Grid.OPEN:
                    pygame.draw.line(self.surface, self.COLOR_WALL, (px + size, py), (px + size, py + size), 1)
                if y == 0 and grid.get_wall(fx, 0) != Grid.OPEN:
                    pygame.draw.line(self.surface, self.COLOR_WALL, (px, py), (px + size, py), 1)
                if x == 0:
                    pygame.draw.line(self.surface, self.COLOR_WALL, (px, py), (px, py + size), 1)

    def draw_hud(self):
        status = "Done" if self.finished else "Running"
        info = [
            f"FPS: {int(self.clock.get_fps())}",
            f"Size: {self.grid.rows}x{self.grid.columns}",
            f"Open walls: {self.grid.open_wall_count()}" if self.finished else "",
            f"Status: {status}",
            "REC" if self.recorder.active else "",
        ]
        for i, text in enumerate(t for t in info if t):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def advance(self):
        # One step per frame when paced, otherwise big batches
        batch = 1 if self.delay_ms > 0 else 1000
        try:
            for _ in range(batch):
                next(self.steps)
        except StopIteration:
            self.finished = True

    def run_loop(self):
        while self.running:
            self.handle_input()

            if not self.finished:
                self.advance()

            self.draw_maze()
            self.draw_hud()
            pygame.display.flip()

            if self.recorder.active:
                self.recorder.capture_frame(self.surface)

            if self.delay_ms > 0 and not self.finished:
                pygame.time.wait(self.delay_ms)
            self.clock.tick(60)

        self.recorder.stop()
        pygame.quit()
