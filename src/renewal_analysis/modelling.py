"""
Modelling Module
Project: Motor Insurance Renewal Analysis
Purpose: Fit logistic regression, random forest and tuned gradient-boosted trees to predict renewal

All three models consume the same seven explanatory variables. Each fit checks
its training subset first and raises ModelFitError when the data cannot support
a model, so one failing branch never takes the others down with it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf
from sklearn.compose import ColumnTransformer
from sklearn.ensemble import RandomForestClassifier
from sklearn.metrics import roc_auc_score
from sklearn.model_selection import RandomizedSearchCV, StratifiedKFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OrdinalEncoder
from xgboost import XGBClassifier

from . import config


class ModelFitError(ValueError):
    """The training subset cannot support a model (constant feature or a single label class)."""


def label_vector(data: pd.DataFrame, target_column: str = config.TARGET_COL) -> np.ndarray:
    """1 where the policy renewed, 0 otherwise."""
    return (data[target_column] == config.POSITIVE_LABEL).astype(int).to_numpy()


@dataclass
class LogisticModel:
    """Fitted logit GLM plus the pieces needed to score new policies."""
    results: object
    features: List[str]
    alpha: float = config.ALPHA

    def coefficients(self) -> pd.DataFrame:
        """Estimates with standard errors, z, p-values and odds ratios."""
        res = self.results
        table = pd.DataFrame({
            'coef': res.params,
            'std_err': res.bse,
            'z': res.tvalues,
            'p_value': res.pvalues,
            'odds_ratio': np.exp(res.params),
        })
        table['significant'] = table['p_value'] < self.alpha
        return table

    def predict_proba(self, data: pd.DataFrame) -> np.ndarray:
        """P(renewed = Yes) for each row of `data`."""
        return np.asarray(self.results.predict(data[self.features]), dtype=float)


@dataclass
class TunedModel:
    """Best gradient-boosting pipeline from the cross-validated search."""
    best_estimator: Pipeline
    best_params: Dict[str, object]
    cv_auc: float
    apparent_auc: float
    cv_results: pd.DataFrame = field(repr=False)

    def predict_proba(self, data: pd.DataFrame) -> np.ndarray:
        return self.best_estimator.predict_proba(data)[:, 1]


class ModelTrainer:
    """Train the three renewal classifiers on a training subset"""

    def __init__(self, features: Sequence[str] = tuple(config.MODEL_FEATURES),
                 target_column: str = config.TARGET_COL, seed: int = config.SEED):
        self.features = list(features)
        self.target_column = target_column
        self.seed = seed

    def categorical_features(self, data: pd.DataFrame) -> List[str]:
        return [col for col in self.features
                if not pd.api.types.is_numeric_dtype(data[col])
                or isinstance(data[col].dtype, pd.CategoricalDtype)]

    def numeric_features(self, data: pd.DataFrame) -> List[str]:
        categorical = self.categorical_features(data)
        return [col for col in self.features if col not in categorical]

    def check_training_data(self, train: pd.DataFrame) -> None:
        """
        Refuse degenerate training data before any fitting starts

        Raises:
            ModelFitError: A feature has no variance, or only one label class is present
        """
        if len(train) == 0:
            raise ModelFitError("Training subset is empty")
        constant = [col for col in self.features if train[col].nunique(dropna=True) <= 1]
        if constant:
            raise ModelFitError(f"Features with a single unique value in the training subset: {constant}")
        classes = train[self.target_column].dropna().unique()
        if len(classes) < 2:
            raise ModelFitError(
                f"Label '{self.target_column}' has only one class in the training subset: {list(classes)}"
            )

    def build_preprocessor(self, data: pd.DataFrame) -> ColumnTransformer:
        """
        One integer column per categorical feature, numeric features passed through unscaled

        The tree models see exactly one input per explanatory variable, so
        max_features and the sampled feature count are counts of variables.
        Levels not seen while fitting are coded -1.
        """
        return ColumnTransformer(
            transformers=[
                ('cat', OrdinalEncoder(handle_unknown='use_encoded_value', unknown_value=-1),
                 self.categorical_features(data)),
                ('num', 'passthrough', self.numeric_features(data)),
            ]
        )

    def fit_logistic_regression(self, train: pd.DataFrame) -> LogisticModel:
        """
        Logistic regression as a binomial GLM with logit link, fitted by maximum
        likelihood (IRLS) without any penalty term.
        """
        self.check_training_data(train)

        categorical = self.categorical_features(train)
        terms = [f"C({col})" if col in categorical else col for col in self.features]
        formula = "renewed_flag ~ " + " + ".join(terms)

        frame = train[self.features].copy()
        frame['renewed_flag'] = label_vector(train, self.target_column)

        print(f"\n[MODEL] Logistic regression: {formula}")
        results = smf.glm(formula, data=frame, family=sm.families.Binomial()).fit()
        model = LogisticModel(results=results, features=self.features)
        print(model.coefficients().round(4).to_string())
        return model

    def fit_random_forest(self, train: pd.DataFrame, n_estimators: int = config.RF_N_ESTIMATORS,
                          max_features: int = config.RF_MAX_FEATURES) -> Pipeline:
        """
        Random forest of `n_estimators` trees, `max_features` candidate variables
        per split, seeded so the forest is reproducible.
        """
        self.check_training_data(train)

        print(f"\n[MODEL] Random forest: {n_estimators} trees, {max_features} variables per split")
        pipe = Pipeline([
            ('pre', self.build_preprocessor(train)),
            ('clf', RandomForestClassifier(n_estimators=n_estimators, max_features=max_features,
                                           n_jobs=-1, random_state=self.seed)),
        ])
        pipe.fit(train[self.features], label_vector(train, self.target_column))
        print(self.feature_importances(pipe).head(10).to_string(index=False))
        return pipe

    def tune_gradient_boosting(self, train: pd.DataFrame, n_iter: int = config.XGB_N_ITER,
                               cv_folds: int = config.CV_FOLDS,
                               param_distributions: Dict[str, list] = None) -> TunedModel:
        """
        Gradient-boosted trees with a randomized hyperparameter search

        Candidates are scored by ROC AUC over stratified `cv_folds`-fold CV, the
        best one is refit on the whole training subset. The refit model's AUC on
        that same subset is kept as the apparent (resubstitution) score.

        `feature_count` in the search space is the number of the seven variables
        sampled per tree; xgboost takes it as the fraction colsample_bytree.
        """
        self.check_training_data(train)
        if param_distributions is None:
            param_distributions = config.XGB_PARAM_DISTRIBUTIONS

        n_features = len(self.features)
        search_space = {}
        for name, values in param_distributions.items():
            if name == 'feature_count':
                search_space['clf__colsample_bytree'] = [min(count, n_features) / n_features for count in values]
            else:
                search_space[f'clf__{name}'] = list(values)

        pipe = Pipeline([
            ('pre', self.build_preprocessor(train)),
            ('clf', XGBClassifier(objective='binary:logistic', eval_metric='auc', tree_method='hist',
                                  random_state=self.seed, n_jobs=1, verbosity=0)),
        ])
        cv = StratifiedKFold(n_splits=cv_folds, shuffle=True, random_state=self.seed)
        search = RandomizedSearchCV(pipe, param_distributions=search_space, n_iter=n_iter,
                                    scoring='roc_auc', cv=cv, refit=True, n_jobs=-1,
                                    random_state=self.seed)

        X = train[self.features]
        y = label_vector(train, self.target_column)
        print(f"\n[MODEL] Gradient boosting: {n_iter} candidates x {cv_folds}-fold CV (scoring=roc_auc)")
        search.fit(X, y)

        best_params = {key.replace('clf__', ''): value for key, value in search.best_params_.items()}
        if 'colsample_bytree' in best_params:
            best_params['feature_count'] = int(round(best_params['colsample_bytree'] * n_features))
        apparent_auc = float(roc_auc_score(y, search.best_estimator_.predict_proba(X)[:, 1]))

        tuned = TunedModel(
            best_estimator=search.best_estimator_,
            best_params=best_params,
            cv_auc=float(search.best_score_),
            apparent_auc=apparent_auc,
            cv_results=pd.DataFrame(search.cv_results_),
        )
        print({"cv_auc": round(tuned.cv_auc, 4), "apparent_auc": round(apparent_auc, 4),
               "best_params": best_params})
        return tuned

    @staticmethod
    def feature_importances(pipe: Pipeline) -> pd.DataFrame:
        """Impurity/gain importances of a fitted tree pipeline, largest first."""
        names = pipe.named_steps['pre'].get_feature_names_out()
        importances = pipe.named_steps['clf'].feature_importances_
        return (pd.DataFrame({'feature': names, 'importance': importances})
                .sort_values('importance', ascending=False)
                .reset_index(drop=True))
