"""
Genetic Algorithm
=================

Evolves network weights instead of training them by gradient descent.

Each individual is a Network whose flat parameter vector is its genome
(see Network.to_flat_vector). One generation:

    1. Evaluate: every individual plays one game, fitness = game score
    2. Sort population by fitness (best first)
    3. Elitism: the best individual survives unchanged
    4. Fill the rest by tournament selection + Gaussian mutation

The best network of every generation is written to the weights file.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

import sys
sys.path.append('../..')
from config import Config

from .network import Network
from demonbot.game.actions import genetic_action_from_index
from demonbot.game.base_game import RamEnvironment
from demonbot.game.features import extract_basic_features
from demonbot.utils.logger import get_logger, log_generation_metrics

logger = get_logger(__name__)


@dataclass
class Individual:
    """A network together with its last measured fitness."""
    network: Network
    fitness: float = 0.0

    def copy(self) -> 'Individual':
        """Independent copy (network weights included)."""
        return Individual(network=self.network.copy(), fitness=self.fitness)


@dataclass
class GenerationStats:
    """Fitness summary of one generation."""
    generation: int
    best_fitness: float
    mean_fitness: float


class GeneticTrainer:
    """
    Tournament-selection genetic algorithm over network genomes.

    The networks are built with learning_rate 0: they are never trained by
    gradient descent, only mutated.

    Example:
        >>> trainer = GeneticTrainer(env, config, rng=np.random.default_rng(0))
        >>> history = trainer.run(num_generations=100)
    """

    def __init__(
        self,
        env: RamEnvironment,
        config: Optional[Config] = None,
        rng: Optional[np.random.Generator] = None,
        weights_path: Optional[str] = None
    ):
        """
        Initialize the trainer and a random population.

        Args:
            env: Environment used for fitness evaluation
            config: Configuration object
            rng: Random generator for initialization, selection and mutation
            weights_path: Where to save the best network
                (default: config.GENETIC_WEIGHTS_FILE)
        """
        self.env = env
        self.config = config or Config()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.weights_path = weights_path or self.config.GENETIC_WEIGHTS_FILE

        self.population: List[Individual] = [
            Individual(self.create_network()) for _ in range(self.config.POPULATION_SIZE)
        ]
        self.history: List[GenerationStats] = []

    def create_network(self) -> Network:
        """A freshly initialized network with the genetic architecture."""
        return Network(
            self.config.NUM_FEATURES,
            self.config.GA_NUM_HIDDEN,
            self.config.GA_NUM_ACTIONS,
            0.0,
            rng=self.rng
        )

    def evaluate_fitness(self, individual: Individual) -> float:
        """
        Play one game greedily and store the total game score as fitness.

        Args:
            individual: Individual to evaluate

        Returns:
            The fitness
        """
        self.env.reset()
        total_score = 0.0
        step = 0
        while step < self.config.GA_MAX_STEPS and not self.env.game_over():
            state = extract_basic_features(
                self.env.get_ram(), self.env.lives(), self.config.NUM_FEATURES
            )
            q_values = individual.network.predict(state)
            action_idx = int(np.argmax(q_values))
            total_score += self.env.act(genetic_action_from_index(action_idx))
            step += 1

        individual.fitness = total_score
        return total_score

    def tournament_selection(self, tournament_size: Optional[int] = None) -> Individual:
        """
        Pick the fittest of tournament_size randomly drawn individuals.

        Draws are with replacement.
        """
        tournament_size = tournament_size or self.config.TOURNAMENT_SIZE
        size = len(self.population)

        best = self.population[int(self.rng.integers(size))]
        for _ in range(1, tournament_size):
            competitor = self.population[int(self.rng.integers(size))]
            if competitor.fitness > best.fitness:
                best = competitor
        return best

    def mutate(self, individual: Individual) -> None:
        """
        Gaussian point mutation of the genome, in place.

        Each gene mutates with probability MUTATION_RATE by adding
        Normal(0, MUTATION_STRENGTH) noise.
        """
        genome = individual.network.to_flat_vector()
        mask = self.rng.random(genome.size) < self.config.MUTATION_RATE
        noise = self.rng.normal(0.0, self.config.MUTATION_STRENGTH, size=genome.size)
        genome[mask] += noise[mask]
        individual.network.from_flat_vector(genome)

    def next_generation(self) -> None:
        """
        Replace the (already evaluated) population with its offspring.

        The population is sorted best-first before breeding.
        """
        self.population.sort(key=lambda ind: ind.fitness, reverse=True)

        new_population = [self.population[0].copy()]
        while len(new_population) < self.config.POPULATION_SIZE:
            child = self.tournament_selection().copy()
            self.mutate(child)
            new_population.append(child)

        self.population = new_population

    def run_generation(self, generation: int) -> GenerationStats:
        """Evaluate, log, breed and save the elite."""
        fitnesses = [self.evaluate_fitness(ind) for ind in self.population]

        stats = GenerationStats(
            generation=generation,
            best_fitness=float(np.max(fitnesses)),
            mean_fitness=float(np.mean(fitnesses)),
        )
        log_generation_metrics(stats.generation, stats.best_fitness, stats.mean_fitness)

        self.next_generation()

        # population[0] is the elite carried over from this generation
        self.population[0].network.save(self.weights_path)

        self.history.append(stats)
        return stats

    def run(self, num_generations: Optional[int] = None) -> List[GenerationStats]:
        """
        Evolve for num_generations generations.

        Args:
            num_generations: Number of generations (default from config)

        Returns:
            Per-generation statistics
        """
        num_generations = num_generations or self.config.NUM_GENERATIONS
        logger.info(
            f"Starting genetic algorithm: population={self.config.POPULATION_SIZE}, "
            f"generations={num_generations}"
        )

        for generation in range(num_generations):
            self.run_generation(generation)

        return self.history

    def evaluate(self, weights_path: Optional[str] = None, episodes: Optional[int] = None) -> List[float]:
        """
        Load a saved genetic agent and replay it.

        Args:
            weights_path: Weights to load (default: self.weights_path)
            episodes: Number of games (default: config.GA_EVAL_EPISODES)

        Returns:
            Score of every game
        """
        weights_path = weights_path or self.weights_path
        episodes = episodes or self.config.GA_EVAL_EPISODES

        best_agent = Individual(self.create_network())
        best_agent.network.load(weights_path)

        scores = []
        for episode in range(1, episodes + 1):
            score = self.evaluate_fitness(best_agent)
            scores.append(score)
            logger.info(f"Evaluation - episode {episode}, score: {score:.1f}")
        return scores
