import pygame
import numpy as np
from bmp_maze.core.bitmap import PixelBuffer

class BitmapViewer:
    COLOR_BG = (40, 40, 40)

    def __init__(self, pixels: PixelBuffer, generator=None, width=1280, height=720):
        self.pixels = pixels
        self.generator = generator
        self.screen_width = width
        self.screen_height = height

        # Camera
        self.scale = 1.0  # Screen pixels per image pixel
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.zoom_speed = 1.1

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.gen_finished = generator is None
        self.gen_iter = None

    def build_surface(self) -> pygame.Surface:
        """Bitmap as an RGB surface, flipped from BMP row order to top-down."""
        img = self.pixels.to_array()[::-1]
        rgb = np.repeat((img * 255)[:, :, np.newaxis], 3, axis=2)
        # surfarray expects (width, height, 3)
        return pygame.surfarray.make_surface(np.ascontiguousarray(rgb.transpose(1, 0, 2)))

    def fit_to_screen(self):
        """Auto-adjust zoom and pan to fit the entire image on screen with padding."""
        padding = 40
        available_w = self.screen_width - (padding * 2)
        available_h = self.screen_height - (padding * 2)

        self.scale = max(0.1, min(available_w / self.pixels.image_width,
                                  available_h / self.pixels.image_height))

        self.offset_x = (self.screen_width - self.pixels.image_width * self.scale) / 2
        self.offset_y = (self.screen_height - self.pixels.image_height * self.scale) / 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(
            f"BMP Maze - {self.pixels.maze_width}x{self.pixels.maze_height}"
        )
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)

        self.fit_to_screen()

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h

            elif event.type == pygame.MOUSEWHEEL:
                # Zoom towards mouse
                mx, my = pygame.mouse.get_pos()
                wx = (mx - self.offset_x) / self.scale
                wy = (my - self.offset_y) / self.scale

                if event.y > 0:
                    self.scale *= self.zoom_speed
                else:
                    self.scale /= self.zoom_speed
                self.scale = max(0.1, min(100.0, self.scale))

                self.offset_x = mx - wx * self.scale
                self.offset_y = my - wy * self.scale

            elif event.type == pygame.MOUSEMOTION:
                if pygame.mouse.get_pressed()[0]:
                    self.offset_x += event.rel[0]
                    self.offset_y += event.rel[1]

    def draw(self):
        self.surface.fill(self.COLOR_BG)
        image = self.build_surface()
        size = (max(1, int(self.pixels.image_width * self.scale)),
                max(1, int(self.pixels.image_height * self.scale)))
        self.surface.blit(pygame.transform.scale(image, size), (int(self.offset_x), int(self.offset_y)))

        status = "Done" if self.gen_finished else "Running"
        info = [
            f"Image: {self.pixels.image_width}x{self.pixels.image_height} px",
            f"Zoom: {self.scale:.2f}",
            f"Status: {status}",
        ]
        for i, text in enumerate(info):
            lbl = self.font.render(text, True, (255, 200, 0))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def run_loop(self):
        if self.generator and self.gen_iter is None:
            self.gen_iter = self.generator.run()

        while self.running:
            self.handle_input()

            # Step generator
            if self.gen_iter and not self.gen_finished:
                try:
                    for _ in range(20):
                        next(self.gen_iter)
                except StopIteration:
                    self.gen_finished = True

            self.draw()
            pygame.display.flip()
            self.clock.tick(60)

        pygame.quit()

    def finish(self):
        """Runs whatever generation is left after the window was closed."""
        if self.generator and not self.gen_finished:
            if self.gen_iter is None:
                self.gen_iter = self.generator.run()
            for _ in self.gen_iter:
                pass
            self.gen_finished = True
