"""
Tests for the genetic algorithm.

These tests verify:
    - Population construction
    - Fitness evaluation
    - Tournament selection and mutation
    - Elitism and generation bookkeeping
    - Saving and replaying the best agent
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config
from demonbot.ai.genetic import GeneticTrainer, Individual, GenerationStats
from tests.conftest import FakeEnvironment


@pytest.fixture
def config():
    """Tiny population for fast tests."""
    cfg = Config()
    cfg.POPULATION_SIZE = 6
    cfg.TOURNAMENT_SIZE = 3
    cfg.GA_NUM_HIDDEN = 4
    cfg.GA_MAX_STEPS = 50
    cfg.GA_EVAL_EPISODES = 2
    return cfg


@pytest.fixture
def trainer(config, rng, tmp_path):
    """Trainer against a 10-step game."""
    env = FakeEnvironment(episode_length=10, reward_per_step=2.0)
    return GeneticTrainer(env, config, rng=rng, weights_path=str(tmp_path / "ga.txt"))


class TestPopulation:
    """Test population construction."""

    def test_population_size(self, trainer, config):
        """The population has POPULATION_SIZE individuals."""
        assert len(trainer.population) == config.POPULATION_SIZE

    def test_genetic_architecture(self, trainer, config):
        """Networks use the genetic hidden size and two outputs."""
        net = trainer.population[0].network
        assert net.input_size == config.NUM_FEATURES
        assert net.hidden_size == config.GA_NUM_HIDDEN
        assert net.output_size == config.GA_NUM_ACTIONS
        assert net.learning_rate == 0.0

    def test_individuals_differ(self, trainer):
        """Each individual is independently initialized."""
        a = trainer.population[0].network.to_flat_vector()
        b = trainer.population[1].network.to_flat_vector()
        assert not np.array_equal(a, b)

    def test_individual_copy_is_deep(self, trainer):
        """Individual.copy() does not share weights."""
        original = trainer.population[0]
        clone = original.copy()
        clone.network.from_flat_vector(np.zeros(clone.network.parameter_count))
        assert np.any(original.network.to_flat_vector() != 0.0)


class TestFitness:
    """Test fitness evaluation."""

    def test_fitness_is_game_score(self, trainer):
        """Fitness is the summed game reward of one game."""
        individual = trainer.population[0]
        assert trainer.evaluate_fitness(individual) == pytest.approx(20.0)
        assert individual.fitness == pytest.approx(20.0)

    def test_only_firing_moves_are_sent(self, trainer):
        """The genetic agent only plays RIGHTFIRE and LEFTFIRE."""
        trainer.evaluate_fitness(trainer.population[0])
        assert set(trainer.env.actions) <= {11, 12}

    def test_step_limit(self, config, rng, tmp_path):
        """GA_MAX_STEPS caps an endless game."""
        env = FakeEnvironment(episode_length=10_000)
        trainer = GeneticTrainer(env, config, rng=rng, weights_path=str(tmp_path / "ga.txt"))
        trainer.evaluate_fitness(trainer.population[0])
        assert len(env.actions) == config.GA_MAX_STEPS


class TestOperators:
    """Test selection and mutation."""

    def test_tournament_prefers_fitter(self, trainer):
        """With a large tournament the best individual nearly always wins."""
        for i, individual in enumerate(trainer.population):
            individual.fitness = float(i)
        winners = [trainer.tournament_selection(tournament_size=50).fitness for _ in range(20)]
        assert max(winners) == 5.0
        assert np.mean(winners) > 4.0

    def test_tournament_of_one_is_random(self, trainer):
        """Tournament size 1 picks any individual."""
        for i, individual in enumerate(trainer.population):
            individual.fitness = float(i)
        picks = {trainer.tournament_selection(tournament_size=1).fitness for _ in range(200)}
        assert len(picks) > 1

    def test_mutation_changes_some_genes(self, trainer, config):
        """Mutation perturbs roughly MUTATION_RATE of the genes."""
        individual = trainer.population[0]
        before = individual.network.to_flat_vector()
        trainer.mutate(individual)
        after = individual.network.to_flat_vector()

        changed = np.mean(before != after)
        assert 0.0 < changed < 0.6

    def test_zero_rate_mutation_is_identity(self, trainer, config):
        """MUTATION_RATE 0 changes nothing."""
        config.MUTATION_RATE = 0.0
        individual = trainer.population[0]
        before = individual.network.to_flat_vector()
        trainer.mutate(individual)
        assert np.array_equal(before, individual.network.to_flat_vector())


class TestGenerations:
    """Test whole generations."""

    def test_elite_survives_unchanged(self, trainer):
        """The best individual is carried over first, unmutated."""
        for i, individual in enumerate(trainer.population):
            individual.fitness = float(i)
        best = trainer.population[-1].network.to_flat_vector()

        trainer.next_generation()

        assert np.array_equal(trainer.population[0].network.to_flat_vector(), best)
        assert len(trainer.population) == trainer.config.POPULATION_SIZE

    def test_offspring_are_independent(self, trainer):
        """No two individuals share a network object."""
        trainer.next_generation()
        networks = [id(ind.network) for ind in trainer.population]
        assert len(set(networks)) == len(networks)

    def test_run_generation_saves_best(self, trainer):
        """Each generation writes the elite's weights."""
        stats = trainer.run_generation(0)
        assert isinstance(stats, GenerationStats)
        assert stats.best_fitness >= stats.mean_fitness
        assert os.path.exists(trainer.weights_path)

    def test_run_history(self, trainer):
        """run() records one entry per generation."""
        history = trainer.run(num_generations=3)
        assert [s.generation for s in history] == [0, 1, 2]

    def test_evaluate_replays_saved_agent(self, trainer, config):
        """evaluate() loads the saved elite and plays GA_EVAL_EPISODES games."""
        trainer.run(num_generations=1)
        scores = trainer.evaluate()
        assert len(scores) == config.GA_EVAL_EPISODES
        assert all(score == pytest.approx(20.0) for score in scores)

    def test_seeded_runs_agree(self, config, tmp_path):
        """Same seed, same evolved elite."""
        def evolve(seed):
            env = FakeEnvironment(episode_length=10)
            trainer = GeneticTrainer(env, config, rng=np.random.default_rng(seed),
                                     weights_path=str(tmp_path / f"ga_{seed}.txt"))
            trainer.run(num_generations=2)
            return trainer.population[0].network.to_flat_vector()

        assert np.array_equal(evolve(9), evolve(9))


def test_individual_defaults():
    """A new Individual starts with zero fitness."""
    from demonbot.ai.network import Network
    individual = Individual(Network(2, 2, 2, 0.0, rng=np.random.default_rng(0)))
    assert individual.fitness == 0.0
